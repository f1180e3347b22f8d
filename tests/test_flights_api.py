"""
Tests for the flight REST endpoints.

Runs the real application against a temporary SQLite database.
"""

import time
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from flight_tracker.schema import parse_timestamp


def _create(client, payload):
    response = client.post('/api/flights', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


class TestHealth:
    """Health endpoint."""

    def test_health_reports_status_and_environment(self, client):
        response = client.get('/api/health')

        assert response.status_code == 200
        body = response.get_json()
        assert body['status'] == 'ok'
        assert body['environment'] == 'development'
        assert parse_timestamp(body['timestamp']) is not None

    def test_health_does_not_touch_storage(self, client):
        with patch('flight_tracker.repository.list_flights') as list_flights:
            client.get('/api/health')
        list_flights.assert_not_called()


class TestCreateAndFetch:
    """POST then GET round trips."""

    def test_create_assigns_id_and_defaults(self, client, flight_payload):
        created = _create(client, flight_payload)

        assert isinstance(created['id'], int)
        assert created['status'] == 'scheduled'
        assert created['flightNumber'] == 'AA100'
        assert created['gate'] is None
        assert created['createdAt'] == created['updatedAt']

    def test_fetch_returns_submitted_fields(self, client, flight_payload):
        flight_payload.update(gate='B12', terminal='4', aircraft='A321', notes='Window seats full')
        created = _create(client, flight_payload)

        response = client.get(f'/api/flights/{created["id"]}')

        assert response.status_code == 200
        fetched = response.get_json()
        assert fetched == created
        for key in ('flightNumber', 'airline', 'origin', 'destination', 'gate', 'terminal', 'aircraft', 'notes'):
            assert fetched[key] == flight_payload[key]
        assert parse_timestamp(fetched['departureTime']) == parse_timestamp(flight_payload['departureTime'])
        assert parse_timestamp(fetched['arrivalTime']) == parse_timestamp(flight_payload['arrivalTime'])

    def test_offset_timestamps_are_normalized_to_utc(self, client, flight_payload):
        flight_payload['departureTime'] = '2024-01-01T05:00:00-05:00'
        created = _create(client, flight_payload)

        assert parse_timestamp(created['departureTime']) == parse_timestamp('2024-01-01T10:00:00Z')
        assert created['departureTime'].endswith('Z')

    def test_any_fraction_length_is_accepted(self, client, flight_payload):
        flight_payload['departureTime'] = '2024-01-01T10:00:00.5Z'
        created = _create(client, flight_payload)

        assert parse_timestamp(created['departureTime']) == datetime(2024, 1, 1, 10, 0, 0, 500000, tzinfo=timezone.utc)
        assert parse_timestamp('2024-01-01T10:00:00.1234567+00:00').microsecond == 123456

    def test_duplicate_flight_numbers_are_allowed(self, client, flight_payload):
        first = _create(client, flight_payload)
        flight_payload['departureTime'] = '2024-01-02T10:00:00Z'
        second = _create(client, flight_payload)

        assert first['id'] != second['id']
        assert first['flightNumber'] == second['flightNumber']

    def test_create_ignores_server_assigned_fields(self, client, flight_payload):
        flight_payload.update(id=999, createdAt='2000-01-01T00:00:00Z', updatedAt='2000-01-01T00:00:00Z')
        created = _create(client, flight_payload)

        assert created['id'] != 999
        assert not created['createdAt'].startswith('2000')

    def test_create_ignores_unknown_fields(self, client, flight_payload):
        flight_payload['seatMap'] = 'ignored'
        created = _create(client, flight_payload)
        assert 'seatMap' not in created


class TestCreateValidation:
    """Bodies rejected before they reach storage."""

    @pytest.mark.parametrize('missing', ['flightNumber', 'airline', 'origin', 'destination',
                                         'departureTime', 'arrivalTime'])
    def test_missing_required_field(self, client, flight_payload, missing):
        del flight_payload[missing]

        response = client.post('/api/flights', json=flight_payload)

        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'Invalid flight data'
        assert missing in body['message']

    def test_unknown_status(self, client, flight_payload):
        flight_payload['status'] = 'teleported'
        response = client.post('/api/flights', json=flight_payload)
        assert response.status_code == 400
        assert 'status' in response.get_json()['message']

    def test_malformed_timestamp(self, client, flight_payload):
        flight_payload['arrivalTime'] = 'tomorrow-ish'
        response = client.post('/api/flights', json=flight_payload)
        assert response.status_code == 400
        assert 'arrivalTime' in response.get_json()['message']

    def test_non_json_body(self, client):
        response = client.post('/api/flights', data='not json', content_type='text/plain')
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Request body must be a JSON object'

    def test_overlong_gate(self, client, flight_payload):
        flight_payload['gate'] = 'G' * 11
        response = client.post('/api/flights', json=flight_payload)
        assert response.status_code == 400

    def test_validation_failure_does_not_reach_storage(self, client, flight_payload):
        del flight_payload['airline']
        with patch('flight_tracker.repository.insert_flight') as insert_flight:
            client.post('/api/flights', json=flight_payload)
        insert_flight.assert_not_called()


class TestListFlights:
    """GET /api/flights."""

    def test_empty_list(self, client):
        response = client.get('/api/flights')
        assert response.status_code == 200
        assert response.get_json() == []

    def test_ordered_by_departure_descending(self, client, flight_payload):
        departures = ['2024-03-01T08:00:00Z', '2024-01-15T08:00:00Z', '2024-06-30T23:00:00Z', '2024-02-01T00:00:00Z']
        for index, departure in enumerate(departures):
            payload = dict(flight_payload, flightNumber=f'AA{index}', departureTime=departure)
            _create(client, payload)

        flights = client.get('/api/flights').get_json()

        listed = [parse_timestamp(f['departureTime']) for f in flights]
        assert listed == sorted(listed, reverse=True)
        assert [f['flightNumber'] for f in flights] == ['AA2', 'AA0', 'AA3', 'AA1']


class TestInvalidIds:
    """Non-numeric ids are rejected with 400 and never reach storage."""

    @pytest.mark.parametrize('method', ['get', 'put', 'delete'])
    def test_non_numeric_id(self, client, method):
        with patch('flight_tracker.repository.get_flight') as get_flight, \
                patch('flight_tracker.repository.update_flight') as update_flight, \
                patch('flight_tracker.repository.delete_flight') as delete_flight:
            response = getattr(client, method)('/api/flights/abc', json={})

        assert response.status_code == 400
        assert response.get_json() == {
            'error': 'Invalid flight ID',
            'message': 'Flight ID must be a number',
        }
        get_flight.assert_not_called()
        update_flight.assert_not_called()
        delete_flight.assert_not_called()

    def test_leading_integer_is_used(self, client, flight_payload):
        created = _create(client, flight_payload)
        response = client.get(f'/api/flights/{created["id"]}abc')
        assert response.status_code == 200
        assert response.get_json()['id'] == created['id']

    def test_missing_flight(self, client):
        response = client.get('/api/flights/4242')
        assert response.status_code == 404
        assert response.get_json() == {
            'error': 'Flight not found',
            'message': 'No flight found with ID 4242',
        }


class TestUpdateFlight:
    """PUT /api/flights/<id>."""

    def test_partial_update_keeps_other_fields(self, client, flight_payload):
        created = _create(client, dict(flight_payload, gate='C3'))
        time.sleep(0.01)

        response = client.put(f'/api/flights/{created["id"]}', json={'status': 'delayed', 'notes': 'Crew late'})

        assert response.status_code == 200
        updated = response.get_json()
        assert updated['status'] == 'delayed'
        assert updated['notes'] == 'Crew late'
        for key in ('id', 'flightNumber', 'airline', 'origin', 'destination',
                    'departureTime', 'arrivalTime', 'gate', 'createdAt'):
            assert updated[key] == created[key]
        assert parse_timestamp(updated['updatedAt']) > parse_timestamp(created['updatedAt'])

    def test_empty_update_still_advances_updated_at(self, client, flight_payload):
        created = _create(client, flight_payload)

        updated = client.put(f'/api/flights/{created["id"]}', json={}).get_json()

        assert parse_timestamp(updated['updatedAt']) > parse_timestamp(created['updatedAt'])
        assert updated['createdAt'] == created['createdAt']

    def test_optional_field_can_be_cleared(self, client, flight_payload):
        created = _create(client, dict(flight_payload, gate='C3'))
        updated = client.put(f'/api/flights/{created["id"]}', json={'gate': None}).get_json()
        assert updated['gate'] is None

    def test_required_field_cannot_be_nulled(self, client, flight_payload):
        created = _create(client, flight_payload)
        response = client.put(f'/api/flights/{created["id"]}', json={'airline': None})
        assert response.status_code == 400

    def test_status_cannot_be_nulled(self, client, flight_payload):
        created = _create(client, flight_payload)
        response = client.put(f'/api/flights/{created["id"]}', json={'status': None})
        assert response.status_code == 400

    def test_update_missing_flight(self, client):
        response = client.put('/api/flights/4242', json={'status': 'boarding'})
        assert response.status_code == 404


class TestDeleteFlight:
    """DELETE /api/flights/<id>."""

    def test_delete_returns_snapshot_then_404(self, client, flight_payload):
        created = _create(client, flight_payload)

        response = client.delete(f'/api/flights/{created["id"]}')

        assert response.status_code == 200
        body = response.get_json()
        assert body['message'] == 'Flight deleted successfully'
        assert body['flight'] == created
        assert client.get(f'/api/flights/{created["id"]}').status_code == 404

    def test_double_delete_is_404(self, client, flight_payload):
        created = _create(client, flight_payload)
        client.delete(f'/api/flights/{created["id"]}')

        response = client.delete(f'/api/flights/{created["id"]}')

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Flight not found'

    def test_deleted_ids_are_not_reused(self, client, flight_payload):
        first = _create(client, flight_payload)
        client.delete(f'/api/flights/{first["id"]}')

        second = _create(client, flight_payload)

        assert second['id'] > first['id']


class TestEndToEnd:
    """Full lifecycle of one flight."""

    def test_lifecycle(self, client, flight_payload):
        created = _create(client, flight_payload)
        assert created['status'] == 'scheduled'
        flight_id = created['id']

        fetched = client.get(f'/api/flights/{flight_id}').get_json()
        assert fetched == created

        boarding = client.put(f'/api/flights/{flight_id}', json={'status': 'boarding'})
        assert boarding.status_code == 200
        boarding_body = boarding.get_json()
        assert boarding_body['status'] == 'boarding'
        for key, value in created.items():
            if key not in ('status', 'updatedAt'):
                assert boarding_body[key] == value

        deleted = client.delete(f'/api/flights/{flight_id}')
        assert deleted.status_code == 200
        assert deleted.get_json()['flight'] == boarding_body

        assert client.get(f'/api/flights/{flight_id}').status_code == 404


class TestErrorHandling:
    """Storage failures and uncaught errors."""

    def _storage_failure(self):
        return OperationalError('SELECT * FROM flights', {}, Exception('database is locked'))

    def test_storage_error_shows_detail_in_development(self, client):
        with patch('flight_tracker.repository.list_flights', side_effect=self._storage_failure()):
            response = client.get('/api/flights')

        assert response.status_code == 500
        body = response.get_json()
        assert body['error'] == 'Failed to fetch flights'
        assert 'database is locked' in body['message']

    def test_storage_error_is_generic_in_production(self, app, client):
        app.config['ENVIRONMENT'] = 'production'
        with patch('flight_tracker.repository.insert_flight', side_effect=self._storage_failure()):
            response = client.post('/api/flights', json={
                'flightNumber': 'AA1', 'airline': 'Acme', 'origin': 'A', 'destination': 'B',
                'departureTime': '2024-01-01T00:00:00Z', 'arrivalTime': '2024-01-01T01:00:00Z',
            })

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to create flight', 'message': 'Something went wrong'}

    def test_uncaught_error_development(self, client):
        with patch('flight_tracker.repository.get_flight', side_effect=RuntimeError('kaput')):
            response = client.get('/api/flights/1')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Internal server error', 'message': 'kaput'}

    def test_uncaught_error_production(self, app, client):
        app.config['ENVIRONMENT'] = 'production'
        with patch('flight_tracker.repository.get_flight', side_effect=RuntimeError('kaput')):
            response = client.get('/api/flights/1')

        assert response.status_code == 500
        assert response.get_json()['message'] == 'Something went wrong'

    def test_unknown_api_route(self, client):
        response = client.get('/api/airports')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'API endpoint not found'

    def test_wrong_method_keeps_status(self, client):
        response = client.patch('/api/flights/1', json={})
        assert response.status_code == 405
        assert 'error' in response.get_json()
