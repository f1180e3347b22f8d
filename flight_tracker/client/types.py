"""
Typed values exchanged with the Flight Tracker API.

Normalizes the JSON responses into dataclasses and models the edit
form's draft.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional

from flight_tracker.schema import (
    FlightStatus,
    DEFAULT_STATUS,
    OPTIONAL_TEXT_FIELDS,
    format_timestamp,
    parse_timestamp,
)


@dataclass(frozen=True)
class FlightRecord:
    """A flight as returned by the API, with parsed timestamps."""
    id: int
    flight_number: str
    airline: str
    origin: str
    destination: str
    departure_time: datetime
    arrival_time: datetime
    status: FlightStatus
    gate: Optional[str] = None
    terminal: Optional[str] = None
    aircraft: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FlightRecord':
        """
        Parse the API's camelCase JSON object.

        Raises KeyError/ValueError if the payload is not a flight.
        """
        return cls(
            id=int(data['id']),
            flight_number=data['flightNumber'],
            airline=data['airline'],
            origin=data['origin'],
            destination=data['destination'],
            departure_time=parse_timestamp(data['departureTime']),
            arrival_time=parse_timestamp(data['arrivalTime']),
            status=FlightStatus(data.get('status') or DEFAULT_STATUS.value),
            gate=data.get('gate'),
            terminal=data.get('terminal'),
            aircraft=data.get('aircraft'),
            notes=data.get('notes'),
            created_at=parse_timestamp(data.get('createdAt')),
            updated_at=parse_timestamp(data.get('updatedAt')),
        )


@dataclass(frozen=True)
class HealthStatus:
    """Health check response."""
    status: str
    timestamp: Optional[datetime]
    environment: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HealthStatus':
        return cls(
            status=data['status'],
            timestamp=parse_timestamp(data.get('timestamp')),
            environment=data.get('environment'),
        )

    @property
    def is_ok(self) -> bool:
        return self.status == 'ok'


@dataclass(frozen=True)
class FlightDraft:
    """
    Editable fields of a flight, as held by the edit form.

    Times are kept as the strings the user typed; the server parses them.
    An empty draft is the form's reset state.
    """
    flight_number: str = ''
    airline: str = ''
    origin: str = ''
    destination: str = ''
    departure_time: str = ''
    arrival_time: str = ''
    status: str = DEFAULT_STATUS.value
    gate: str = ''
    terminal: str = ''
    aircraft: str = ''
    notes: str = ''

    @classmethod
    def from_record(cls, record: FlightRecord) -> 'FlightDraft':
        """Prefill the form from an existing flight."""
        return cls(
            flight_number=record.flight_number,
            airline=record.airline,
            origin=record.origin,
            destination=record.destination,
            departure_time=format_timestamp(record.departure_time) or '',
            arrival_time=format_timestamp(record.arrival_time) or '',
            status=record.status.value,
            gate=record.gate or '',
            terminal=record.terminal or '',
            aircraft=record.aircraft or '',
            notes=record.notes or '',
        )

    def to_payload(self, clear_blank: bool = False) -> Dict[str, Any]:
        """
        Request body for create/update.

        Blank optional fields are left out so they are not stored as
        empty strings. With ``clear_blank`` (updates) they are sent as
        null instead, clearing any stored value.
        """
        fields = asdict(self)
        payload = {
            'flightNumber': fields['flight_number'],
            'airline': fields['airline'],
            'origin': fields['origin'],
            'destination': fields['destination'],
            'departureTime': fields['departure_time'],
            'arrivalTime': fields['arrival_time'],
            'status': fields['status'],
        }
        for name in OPTIONAL_TEXT_FIELDS:
            value = fields[name].strip()
            if value:
                payload[name] = value
            elif clear_blank:
                payload[name] = None
        return payload
