"""
Shared flight definitions used by both the server and the client.

Holds the status enumeration, the mapping between JSON (camelCase) and
column (snake_case) attribute names, and timestamp helpers. Nothing here
touches the database, so the client package can import it without a
configured DATABASE_URL.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union


class FlightStatus(str, Enum):
    """
    Operational status of a flight.

    Stored as the plain string value; the database enforces the same set
    with a CHECK constraint.
    """
    SCHEDULED = 'scheduled'
    BOARDING = 'boarding'
    DEPARTED = 'departed'
    IN_FLIGHT = 'in-flight'
    ARRIVED = 'arrived'
    DELAYED = 'delayed'
    CANCELLED = 'cancelled'

    @classmethod
    def values(cls) -> tuple:
        return tuple(member.value for member in cls)


DEFAULT_STATUS = FlightStatus.SCHEDULED

# JSON attribute -> model attribute, for the fields a client may write
EDITABLE_FIELDS = {
    'flightNumber': 'flight_number',
    'airline': 'airline',
    'origin': 'origin',
    'destination': 'destination',
    'departureTime': 'departure_time',
    'arrivalTime': 'arrival_time',
    'status': 'status',
    'gate': 'gate',
    'terminal': 'terminal',
    'aircraft': 'aircraft',
    'notes': 'notes',
}

REQUIRED_FIELDS = (
    'flightNumber',
    'airline',
    'origin',
    'destination',
    'departureTime',
    'arrivalTime',
)

OPTIONAL_TEXT_FIELDS = ('gate', 'terminal', 'aircraft', 'notes')

TIMESTAMP_FIELDS = ('departureTime', 'arrivalTime')

# Column lengths, shared with the model definition
MAX_LENGTHS = {
    'flightNumber': 20,
    'airline': 100,
    'origin': 100,
    'destination': 100,
    'status': 50,
    'gate': 10,
    'terminal': 10,
    'aircraft': 50,
}


_FRACTION = re.compile(r'(?<=:\d\d)\.(\d+)')


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z'. Naive values are taken to be UTC.
    Raises ValueError on malformed input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z') or text.endswith('z'):
            text = text[:-1] + '+00:00'
        # fromisoformat before 3.11 takes only 3 or 6 fractional digits
        text = _FRACTION.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), text, count=1)
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f'Unsupported timestamp value: {value!r}')
    return ensure_utc(parsed)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes and normalize aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as ISO-8601 with an explicit UTC offset."""
    if value is None:
        return None
    return ensure_utc(value).isoformat().replace('+00:00', 'Z')


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
