"""
Client for the Flight Tracker API.

Talks to the REST API and keeps a polled, reconciled view of the
flight list plus the create/edit form.
"""

from flight_tracker.client.api_client import ApiError, FlightApiClient
from flight_tracker.client.board import FlightBoard
from flight_tracker.client.poller import ListPoller
from flight_tracker.client.state import BoardState, ViewMode
from flight_tracker.client.types import FlightDraft, FlightRecord, HealthStatus

__all__ = [
    'ApiError',
    'FlightApiClient',
    'FlightBoard',
    'ListPoller',
    'BoardState',
    'ViewMode',
    'FlightDraft',
    'FlightRecord',
    'HealthStatus',
]
