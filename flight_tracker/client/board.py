"""
Flight board controller.

Owns the BoardState, calls the API client on user actions and timer
ticks, and reconciles the list after mutations: a successful create,
update or delete invalidates the list and refetches it.

Thread-safe: the poller thread and user actions may call in
concurrently. Network calls run outside the lock; only state
transitions are serialized.
"""

import logging
import threading
from typing import Callable, List, Optional

import requests

from flight_tracker.client import state as transitions
from flight_tracker.client.api_client import ApiError, FlightApiClient
from flight_tracker.client.state import BoardState, ViewMode
from flight_tracker.client.types import FlightRecord

logger = logging.getLogger(__name__)

# Failures that turn into the board's error view
FETCH_ERRORS = (ApiError, requests.exceptions.RequestException, ValueError, KeyError)


class FlightBoard:
    """
    List of flights plus create/edit modal.

    Mutation failures are raised to the caller and leave the modal and
    draft as they were, so the user can correct and resubmit.
    """

    def __init__(self, client: Optional[FlightApiClient] = None):
        self.client = client or FlightApiClient.from_config()
        self._state = BoardState()
        self._lock = threading.RLock()
        self._listeners: List[Callable[[BoardState], None]] = []

    @property
    def state(self) -> BoardState:
        with self._lock:
            return self._state

    @property
    def view_mode(self) -> ViewMode:
        return transitions.view_mode(self.state)

    def add_listener(self, listener: Callable[[BoardState], None]) -> None:
        """Register callback invoked with the new state after every change."""
        self._listeners.append(listener)

    def _apply(self, transition, *args, **kwargs):
        """Run a transition under the lock, then notify listeners."""
        with self._lock:
            self._state = transition(self._state, *args, **kwargs)
            new_state = self._state
        self._notify(new_state)
        return new_state

    def _notify(self, new_state: BoardState) -> None:
        for listener in self._listeners:
            try:
                listener(new_state)
            except Exception as e:
                logger.error(f'Board listener error: {e}')

    # -------------------------------------------------------------------------
    # List
    # -------------------------------------------------------------------------

    def refresh(self) -> bool:
        """
        Fetch the flight list.

        Used by the poller, the manual refresh action, the retry action of
        the error view, and after mutations. Returns True on success.
        """
        with self._lock:
            self._state, sequence = transitions.load_started(self._state)
            started = self._state
        self._notify(started)

        try:
            flights = self.client.fetch_flights()
        except FETCH_ERRORS as e:
            logger.warning(f'Loading flights failed: {e}')
            self._apply(transitions.load_failed, sequence, str(e) or 'Failed to load flights')
            return False
        except Exception as e:
            logger.error(f'Unexpected error loading flights: {e}', exc_info=True)
            self._apply(transitions.load_failed, sequence, 'Failed to load flights')
            return False

        self._apply(transitions.load_succeeded, sequence, flights)
        return True

    retry = refresh

    # -------------------------------------------------------------------------
    # Modal / form
    # -------------------------------------------------------------------------

    def open_create(self) -> BoardState:
        return self._apply(transitions.open_create)

    def open_edit(self, flight: FlightRecord) -> BoardState:
        return self._apply(transitions.open_edit, flight)

    def edit_draft(self, **changes) -> BoardState:
        return self._apply(transitions.edit_draft, **changes)

    def close_modal(self) -> BoardState:
        return self._apply(transitions.close_modal)

    def submit(self) -> FlightRecord:
        """
        Save the draft.

        Creates a flight when no flight is being edited, otherwise updates
        the one being edited. On success the modal closes, the draft resets
        and the list is refetched.
        """
        current = self.state

        if current.editing is None:
            saved = self.client.create_flight(current.draft.to_payload())
            logger.info(f'Created flight {saved.id} ({saved.flight_number})')
        else:
            saved = self.client.update_flight(
                current.editing.id,
                current.draft.to_payload(clear_blank=True),
            )
            logger.info(f'Updated flight {saved.id} ({saved.flight_number})')

        self._apply(transitions.submit_succeeded)
        self.refresh()
        return saved

    def delete(self, flight_id: int, confirm: Callable[[int], bool]) -> bool:
        """
        Delete a flight after the user confirms.

        ``confirm`` receives the flight id and must return True to proceed.
        Returns False when the user declined.
        """
        if not confirm(flight_id):
            logger.debug(f'Delete of flight {flight_id} not confirmed')
            return False

        self.client.delete_flight(flight_id)
        logger.info(f'Deleted flight {flight_id}')

        self._apply(transitions.mutation_succeeded)
        self.refresh()
        return True
