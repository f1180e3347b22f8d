"""
Shared fixtures.

The storage layer reads DATABASE_URL at import time, so it is pointed at
a throwaway SQLite file before anything from flight_tracker is imported.
"""

import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix='flight-tracker-tests-')
os.environ['DATABASE_URL'] = 'sqlite:///' + os.path.join(_db_dir, 'flights.db')
os.environ['APP_ENV'] = 'development'

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Optional  # noqa: E402
from urllib.parse import urlsplit  # noqa: E402

import pytest  # noqa: E402
import requests  # noqa: E402

from flight_tracker.app import create_app  # noqa: E402
from flight_tracker.client.api_client import FlightApiClient  # noqa: E402
from flight_tracker.client.types import FlightRecord  # noqa: E402
from flight_tracker.models import Base, engine  # noqa: E402
from flight_tracker.schema import FlightStatus  # noqa: E402


@pytest.fixture
def app():
    """Fresh application and empty flights table for each test."""
    Base.metadata.drop_all(bind=engine)
    application = create_app(environment='development')
    application.config['TESTING'] = True
    yield application
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def flight_payload():
    return {
        'flightNumber': 'AA100',
        'airline': 'Acme',
        'origin': 'JFK',
        'destination': 'LAX',
        'departureTime': '2024-01-01T10:00:00Z',
        'arrivalTime': '2024-01-01T13:00:00Z',
    }


class FlaskTestSession(requests.Session):
    """requests.Session that answers from a Flask test client instead of the network."""

    def __init__(self, test_client):
        super().__init__()
        self.test_client = test_client
        self.calls = []

    def request(self, method, url, json=None, timeout=None, **kwargs):
        path = urlsplit(url).path
        self.calls.append((method, path))
        flask_response = self.test_client.open(path, method=method, json=json)

        response = requests.Response()
        response.status_code = flask_response.status_code
        response.reason = flask_response.status.split(' ', 1)[1] if ' ' in flask_response.status else ''
        response._content = flask_response.get_data()
        response.encoding = 'utf-8'
        response.url = url
        return response


@pytest.fixture
def api_client(client):
    """FlightApiClient wired to the in-process application."""
    return FlightApiClient(base_url='http://testserver', session=FlaskTestSession(client))


def _make_record(
    flight_id: int = 1,
    flight_number: str = 'AA100',
    departure: Optional[datetime] = None,
    status: FlightStatus = FlightStatus.SCHEDULED,
    **overrides,
) -> FlightRecord:
    """FlightRecord for client-side tests that do not need a server."""
    departure = departure or datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    values = dict(
        id=flight_id,
        flight_number=flight_number,
        airline='Acme',
        origin='JFK',
        destination='LAX',
        departure_time=departure,
        arrival_time=departure + timedelta(hours=3),
        status=status,
        created_at=departure,
        updated_at=departure,
    )
    values.update(overrides)
    return FlightRecord(**values)


@pytest.fixture
def make_record():
    """Factory for FlightRecords in client-side tests that do not need a server."""
    return _make_record
