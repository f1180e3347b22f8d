"""
API module for Flight Tracker.

Provides REST endpoints for creating, reading, updating and deleting
flights under /api/flights.
"""

from flight_tracker.api.flights import flights_bp

__all__ = ['flights_bp']
