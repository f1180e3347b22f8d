"""
Flight Tracker REST API client.

Wraps each endpoint in a typed method:
- check_health()          GET    /api/health
- fetch_flights()         GET    /api/flights
- fetch_flight(id)        GET    /api/flights/<id>
- create_flight(payload)  POST   /api/flights
- update_flight(id, p)    PUT    /api/flights/<id>
- delete_flight(id)       DELETE /api/flights/<id>

Non-2xx responses raise ApiError. Network and JSON decoding failures are
logged and re-raised unchanged. There are no retries; a request waits
indefinitely unless a timeout is configured.
"""

import logging
from typing import Any, List, Mapping, Optional

import requests

from flight_tracker.config import config
from flight_tracker.client.types import FlightRecord, HealthStatus

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    HTTP error returned by the API.

    Attributes:
        message: The body's ``message`` (or ``error``), else the status line
        status: HTTP status code
        status_text: HTTP reason phrase
    """

    def __init__(self, message: str, status: int, status_text: str):
        super().__init__(message)
        self.message = message
        self.status = status
        self.status_text = status_text

    def __repr__(self) -> str:
        return f'ApiError({self.status} {self.status_text}: {self.message})'

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


def _error_from_response(response: requests.Response) -> ApiError:
    """Build an ApiError, preferring the message in the JSON body."""
    status_text = response.reason or ''
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    message = body.get('message') or body.get('error') or f'HTTP {response.status_code}: {status_text}'
    return ApiError(message, response.status_code, status_text)


class FlightApiClient:
    """
    Client for the Flight Tracker API.

    Handles:
    - JSON requests over a shared requests.Session
    - Conversion of responses into FlightRecord / HealthStatus
    - Mapping of non-2xx responses onto ApiError
    """

    def __init__(
        self,
        base_url: str = 'http://localhost:5000',
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'FlightApiClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.client.api_url,
            timeout=config.client.timeout,
        )

    def _request(self, method: str, path: str, payload: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            ApiError on non-2xx responses
            requests.RequestException on network errors
            ValueError if a successful response is not JSON
        """
        url = f'{self.base_url}{path}'
        logger.debug(f'{method} {url}')

        try:
            response = self.session.request(
                method,
                url,
                json=dict(payload) if payload is not None else None,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f'Request {method} {path} failed: {e}')
            raise

        if not response.ok:
            error = _error_from_response(response)
            logger.warning(f'{method} {path} returned {error.status}: {error.message}')
            raise error

        try:
            return response.json()
        except ValueError as e:
            logger.error(f'Invalid JSON from {method} {path}: {e}')
            raise

    def check_health(self) -> HealthStatus:
        return HealthStatus.from_dict(self._request('GET', '/api/health'))

    def fetch_flights(self) -> List[FlightRecord]:
        """All flights, latest departure first."""
        data = self._request('GET', '/api/flights')
        return [FlightRecord.from_dict(item) for item in data]

    def fetch_flight(self, flight_id: int) -> FlightRecord:
        return FlightRecord.from_dict(self._request('GET', f'/api/flights/{flight_id}'))

    def create_flight(self, payload: Mapping[str, Any]) -> FlightRecord:
        """Create a flight from a camelCase payload."""
        return FlightRecord.from_dict(self._request('POST', '/api/flights', payload))

    def update_flight(self, flight_id: int, payload: Mapping[str, Any]) -> FlightRecord:
        """Update the fields present in ``payload``."""
        return FlightRecord.from_dict(self._request('PUT', f'/api/flights/{flight_id}', payload))

    def delete_flight(self, flight_id: int) -> FlightRecord:
        """Delete a flight and return the record as it was before deletion."""
        data = self._request('DELETE', f'/api/flights/{flight_id}')
        return FlightRecord.from_dict(data['flight'])
