"""
Plain-text rendering of the flight board.

Exactly one of the loading line, the error panel (with retry hint), the
empty message or the flight cards is rendered, following view_mode().
"""

from datetime import datetime, tzinfo
from typing import List, Optional

from flight_tracker.client.state import BoardState, ViewMode, view_mode
from flight_tracker.client.types import FlightRecord

# Badge color per status
STATUS_COLORS = {
    'scheduled': 'blue',
    'boarding': 'yellow',
    'departed': 'green',
    'in-flight': 'green',
    'arrived': 'gray',
    'delayed': 'orange',
    'cancelled': 'red',
}

_ANSI = {
    'blue': '\033[34m',
    'yellow': '\033[33m',
    'green': '\033[32m',
    'gray': '\033[90m',
    'orange': '\033[38;5;208m',
    'red': '\033[31m',
}
_ANSI_RESET = '\033[0m'


def status_color(status: str) -> str:
    """Badge color name for a status; unknown statuses are gray."""
    return STATUS_COLORS.get(status, 'gray')


def format_time(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Time of day, e.g. '10:00 AM'. Local time unless ``tz`` is given."""
    return value.astimezone(tz).strftime('%I:%M %p')


def format_date(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Calendar date, e.g. 'Jan 1, 2024'. Local time unless ``tz`` is given."""
    local = value.astimezone(tz)
    return f'{local:%b} {local.day}, {local.year}'


def _badge(status: str, color: bool) -> str:
    label = f'[{status.upper()}]'
    if not color:
        return label
    return f'{_ANSI[status_color(status)]}{label}{_ANSI_RESET}'


def render_flight(flight: FlightRecord, tz: Optional[tzinfo] = None, color: bool = False) -> List[str]:
    """Lines of one flight card."""
    lines = [
        f'{flight.flight_number}  {_badge(flight.status.value, color)}',
        f'  {flight.airline}',
        f'  From {flight.origin} -> To {flight.destination}',
        f'  Departure {format_time(flight.departure_time, tz)} {format_date(flight.departure_time, tz)}'
        f'  |  Arrival {format_time(flight.arrival_time, tz)} {format_date(flight.arrival_time, tz)}',
    ]

    details = []
    if flight.gate:
        details.append(f'Gate: {flight.gate}')
    if flight.terminal:
        details.append(f'Terminal: {flight.terminal}')
    if flight.aircraft:
        details.append(f'Aircraft: {flight.aircraft}')
    if details:
        lines.append('  ' + '   '.join(details))

    return lines


def render_board(state: BoardState, tz: Optional[tzinfo] = None, color: bool = False) -> str:
    """Render the board body for the current state."""
    mode = view_mode(state)

    if mode is ViewMode.LOADING:
        return 'Loading flights...'

    if mode is ViewMode.ERROR:
        return '\n'.join([
            'Error Loading Flights',
            f'  {state.error or "Failed to load flights"}',
            '  Press r to try again',
        ])

    if mode is ViewMode.EMPTY:
        return 'No flights found\nThere are no flights in the system yet.'

    cards = ['\n'.join(render_flight(flight, tz, color)) for flight in state.flights]
    return '\n\n'.join(cards)
