"""
Flight Tracker Package.

Flight-tracking CRUD service built with Flask and SQLAlchemy, plus a
polling client.

Modules:
    api/          REST endpoints for flights
    models/       SQLAlchemy ORM models (Flight) and session management
    client/       API client, board state, poller and text rendering
    repository.py Data access for the flights table
    schema.py     Status enum, field names and timestamp helpers
    config.py     Centralized configuration from environment variables
"""

__version__ = '1.0.0'
