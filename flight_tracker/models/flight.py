"""
Flight model - the single tracked entity.

One row per scheduled flight. Rows are created, edited in place and
hard-deleted through the REST API; nothing else writes to this table.

Design notes:
- Surrogate integer key, assigned by the database and never reused
- Required columns are NOT NULL and status is guarded by a CHECK
  constraint, so storage rejects bad rows even without API validation
- No uniqueness on flight_number: the same number recurs across dates
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, Integer, DateTime, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from flight_tracker.models.base import Base
from flight_tracker.schema import (
    FlightStatus,
    DEFAULT_STATUS,
    MAX_LENGTHS,
    format_timestamp,
    utcnow,
)

_STATUS_CHECK = 'status IN ({})'.format(
    ', '.join(f"'{value}'" for value in FlightStatus.values())
)


class Flight(Base):
    """
    A scheduled transit between two locations.

    Timestamps are stored with timezone. SQLite drops the offset, so
    values read back are normalized to UTC on serialization.
    """

    __tablename__ = 'flights'

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Identification
    flight_number: Mapped[str] = mapped_column(
        String(MAX_LENGTHS['flightNumber']),
        nullable=False,
        comment='Flight number (e.g., AA100)'
    )

    airline: Mapped[str] = mapped_column(
        String(MAX_LENGTHS['airline']),
        nullable=False,
    )

    # Route
    origin: Mapped[str] = mapped_column(
        String(MAX_LENGTHS['origin']),
        nullable=False,
    )

    destination: Mapped[str] = mapped_column(
        String(MAX_LENGTHS['destination']),
        nullable=False,
    )

    # Schedule
    departure_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    arrival_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(MAX_LENGTHS['status']),
        nullable=False,
        default=DEFAULT_STATUS.value,
        server_default=DEFAULT_STATUS.value,
    )

    # Optional details
    gate: Mapped[Optional[str]] = mapped_column(String(MAX_LENGTHS['gate']), nullable=True)
    terminal: Mapped[Optional[str]] = mapped_column(String(MAX_LENGTHS['terminal']), nullable=True)
    aircraft: Mapped[Optional[str]] = mapped_column(String(MAX_LENGTHS['aircraft']), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Record timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        CheckConstraint(_STATUS_CHECK, name='ck_flights_status'),
        # Listing is always ordered by departure
        Index('ix_flights_departure_time', 'departure_time'),
        # Keep ids monotonic on SQLite so deleted ids are never handed out again
        {'sqlite_autoincrement': True},
    )

    def __repr__(self) -> str:
        return f'<Flight {self.id} {self.flight_number} {self.origin}->{self.destination} [{self.status}]>'

    def to_dict(self) -> dict:
        """Convert to the JSON shape served by the API."""
        return {
            'id': self.id,
            'flightNumber': self.flight_number,
            'airline': self.airline,
            'origin': self.origin,
            'destination': self.destination,
            'departureTime': format_timestamp(self.departure_time),
            'arrivalTime': format_timestamp(self.arrival_time),
            'status': self.status,
            'gate': self.gate,
            'terminal': self.terminal,
            'aircraft': self.aircraft,
            'notes': self.notes,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }

