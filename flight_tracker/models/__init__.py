"""
Database models for Flight Tracker.

A single table, ``flights``, holds every tracked flight. The schema
enforces required columns and the status enumeration so that storage
rejects malformed rows on its own.
"""

from flight_tracker.models.base import Base, engine, SessionLocal, init_db, get_session, check_connection
from flight_tracker.models.flight import Flight

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'init_db',
    'get_session',
    'check_connection',
    'Flight',
]
