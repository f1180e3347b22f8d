"""
Data access for the flights table.

Each function is one short transaction against a single row (or, for the
listing, a single SELECT). Not-found is signalled by returning None;
storage failures propagate as SQLAlchemy exceptions for the API layer to
map onto HTTP responses.

Values are keyed by model attribute name (``flight_number``, not
``flightNumber``). Server-assigned attributes are never taken from
callers.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select, desc

from flight_tracker.models import Flight, get_session
from flight_tracker.schema import ensure_utc, utcnow

logger = logging.getLogger(__name__)

SERVER_ASSIGNED = frozenset({'id', 'created_at', 'updated_at'})

_COLUMNS = frozenset(column.key for column in Flight.__table__.columns)


def _clean_values(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep writable columns only, normalizing timestamps to UTC."""
    cleaned = {}
    for key, value in values.items():
        if key not in _COLUMNS or key in SERVER_ASSIGNED:
            continue
        if key in ('departure_time', 'arrival_time'):
            value = ensure_utc(value)
        cleaned[key] = value
    return cleaned


def list_flights() -> List[Flight]:
    """All flights, latest departure first."""
    with get_session() as session:
        rows = session.scalars(
            select(Flight).order_by(desc(Flight.departure_time), desc(Flight.id))
        ).all()
    return list(rows)


def get_flight(flight_id: int) -> Optional[Flight]:
    """Flight with the given id, or None."""
    with get_session() as session:
        return session.get(Flight, flight_id)


def insert_flight(values: Mapping[str, Any]) -> Flight:
    """
    Store a new flight and return the stored row.

    Required columns are not checked here; a missing one fails at the
    database as an IntegrityError.
    """
    cleaned = _clean_values(values)
    if cleaned.get('status') is None:
        # Let the column default apply
        cleaned.pop('status', None)

    now = utcnow()
    flight = Flight(**cleaned, created_at=now, updated_at=now)

    with get_session() as session:
        session.add(flight)
        session.flush()
        session.refresh(flight)

    logger.info(f'Created flight {flight.id} ({flight.flight_number})')
    return flight


def update_flight(flight_id: int, values: Mapping[str, Any]) -> Optional[Flight]:
    """
    Apply the supplied fields to a flight and refresh updated_at.

    Fields not present in ``values`` are left untouched. Returns the
    updated row, or None if no flight has this id.
    """
    cleaned = _clean_values(values)

    with get_session() as session:
        flight = session.get(Flight, flight_id)
        if flight is None:
            return None

        for key, value in cleaned.items():
            setattr(flight, key, value)

        now = utcnow()
        previous = ensure_utc(flight.updated_at)
        if previous is not None and now <= previous:
            # Clock did not move; updated_at must still advance
            now = previous + timedelta(microseconds=1)
        flight.updated_at = now

        session.flush()
        session.refresh(flight)

    logger.info(f'Updated flight {flight_id} ({", ".join(sorted(cleaned)) or "no fields"})')
    return flight


def delete_flight(flight_id: int) -> Optional[Flight]:
    """Hard-delete a flight. Returns its state before deletion, or None."""
    with get_session() as session:
        flight = session.get(Flight, flight_id)
        if flight is None:
            return None
        session.delete(flight)

    logger.info(f'Deleted flight {flight_id}')
    return flight
