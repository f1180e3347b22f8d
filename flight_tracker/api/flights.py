"""
Flight CRUD API endpoints.

Provides endpoints for:
- GET    /api/flights      - List all flights, latest departure first
- GET    /api/flights/<id> - Get a single flight
- POST   /api/flights      - Create a flight
- PUT    /api/flights/<id> - Update some fields of a flight
- DELETE /api/flights/<id> - Delete a flight

Every handler has the same shape: parse the path/body, delegate to the
repository, map the result onto a response. Errors use the body
``{"error": ..., "message": ...}``.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, jsonify, request, current_app
from sqlalchemy.exc import SQLAlchemyError

from flight_tracker import repository
from flight_tracker.schema import (
    EDITABLE_FIELDS,
    REQUIRED_FIELDS,
    TIMESTAMP_FIELDS,
    MAX_LENGTHS,
    FlightStatus,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def _error(error: str, message: str, status: int):
    return jsonify({'error': error, 'message': message}), status


def _parse_flight_id(raw: str) -> Optional[int]:
    """Leading integer of the path segment ('12' and '12abc' give 12), or None."""
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


def _invalid_id():
    return _error('Invalid flight ID', 'Flight ID must be a number', 400)


def _not_found(flight_id: int):
    return _error('Flight not found', f'No flight found with ID {flight_id}', 404)


def _storage_error(action: str, exc: Exception):
    """500 response for a failed repository call; detail only in development."""
    logger.error(f'Error trying to {action}: {exc}')
    if current_app.config.get('ENVIRONMENT') == 'development':
        message = str(exc)
    else:
        message = 'Something went wrong'
    return _error(f'Failed to {action}', message, 500)


def parse_flight_payload(data: Any, partial: bool) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    Validate a JSON body and convert it to repository values.

    With ``partial`` set, only the supplied fields are checked (update);
    otherwise every required field must be present (create). Unknown keys
    are ignored.

    Returns (values, error_message). error_message is None when valid.
    """
    if not isinstance(data, dict):
        return {}, 'Request body must be a JSON object'

    if not partial:
        missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
        if missing:
            return {}, f'Missing required fields: {", ".join(missing)}'

    values = {}
    for name, attribute in EDITABLE_FIELDS.items():
        if name not in data:
            continue
        value = data[name]

        if value is None:
            if name in REQUIRED_FIELDS:
                return {}, f'{name} is required'
            if name == 'status':
                if partial:
                    return {}, 'status cannot be null'
                continue
            values[attribute] = None
            continue

        if name in TIMESTAMP_FIELDS:
            try:
                values[attribute] = parse_timestamp(value)
            except (ValueError, TypeError):
                return {}, f'{name} must be an ISO-8601 timestamp'
            continue

        if not isinstance(value, str):
            return {}, f'{name} must be a string'

        if name in REQUIRED_FIELDS and not value.strip():
            return {}, f'{name} must not be empty'

        if name == 'status' and value not in FlightStatus.values():
            return {}, f'status must be one of: {", ".join(FlightStatus.values())}'

        max_length = MAX_LENGTHS.get(name)
        if max_length is not None and len(value) > max_length:
            return {}, f'{name} must be at most {max_length} characters'

        values[attribute] = value

    return values, None


@flights_bp.route('', methods=['GET'])
def list_flights():
    """List every flight, latest departure first. No pagination."""
    try:
        flights = repository.list_flights()
    except SQLAlchemyError as e:
        return _storage_error('fetch flights', e)

    return jsonify([flight.to_dict() for flight in flights])


@flights_bp.route('/<flight_id>', methods=['GET'])
def get_flight(flight_id: str):
    """Get a single flight by id."""
    parsed_id = _parse_flight_id(flight_id)
    if parsed_id is None:
        return _invalid_id()

    try:
        flight = repository.get_flight(parsed_id)
    except SQLAlchemyError as e:
        return _storage_error('fetch flight', e)

    if flight is None:
        return _not_found(parsed_id)

    return jsonify(flight.to_dict())


@flights_bp.route('', methods=['POST'])
def create_flight():
    """
    Create a flight.

    Body: flightNumber, airline, origin, destination, departureTime and
    arrivalTime are required; status defaults to 'scheduled'; gate,
    terminal, aircraft and notes are optional.
    """
    values, problem = parse_flight_payload(request.get_json(silent=True), partial=False)
    if problem:
        return _error('Invalid flight data', problem, 400)

    try:
        flight = repository.insert_flight(values)
    except SQLAlchemyError as e:
        return _storage_error('create flight', e)

    return jsonify(flight.to_dict()), 201


@flights_bp.route('/<flight_id>', methods=['PUT'])
def update_flight(flight_id: str):
    """
    Update a flight.

    Only the fields present in the body change; updatedAt is always
    refreshed, even for an empty body.
    """
    parsed_id = _parse_flight_id(flight_id)
    if parsed_id is None:
        return _invalid_id()

    values, problem = parse_flight_payload(request.get_json(silent=True), partial=True)
    if problem:
        return _error('Invalid flight data', problem, 400)

    try:
        flight = repository.update_flight(parsed_id, values)
    except SQLAlchemyError as e:
        return _storage_error('update flight', e)

    if flight is None:
        return _not_found(parsed_id)

    return jsonify(flight.to_dict())


@flights_bp.route('/<flight_id>', methods=['DELETE'])
def delete_flight(flight_id: str):
    """Delete a flight, returning the deleted record."""
    parsed_id = _parse_flight_id(flight_id)
    if parsed_id is None:
        return _invalid_id()

    try:
        flight = repository.delete_flight(parsed_id)
    except SQLAlchemyError as e:
        return _storage_error('delete flight', e)

    if flight is None:
        return _not_found(parsed_id)

    return jsonify({
        'message': 'Flight deleted successfully',
        'flight': flight.to_dict(),
    })
