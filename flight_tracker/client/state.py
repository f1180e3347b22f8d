"""
Board state and its transitions.

The board's state is an immutable BoardState; every change goes through
one of the pure functions below, which return a new state. Nothing here
does I/O, so each transition can be tested on its own.

Fetch ordering: load_started hands out a monotonically increasing
sequence number. A result carrying a sequence number at or below the
last applied one is stale (an older poll that resolved late) and is
discarded, so the list always reflects the newest request that finished.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from flight_tracker.client.types import FlightDraft, FlightRecord


class ViewMode(str, Enum):
    """What the board shows in place of the list. Exactly one applies."""
    LOADING = 'loading'
    ERROR = 'error'
    EMPTY = 'empty'
    LIST = 'list'


@dataclass(frozen=True)
class BoardState:
    """Flight list cache plus modal/form state."""

    # List cache
    flights: Tuple[FlightRecord, ...] = ()
    has_loaded: bool = False
    fetching: bool = False
    error: Optional[str] = None
    stale: bool = True

    # Fetch sequencing
    last_issued: int = 0
    last_applied: int = 0

    # Modal / form
    modal_open: bool = False
    editing: Optional[FlightRecord] = None
    draft: FlightDraft = field(default_factory=FlightDraft)

    @property
    def is_editing(self) -> bool:
        return self.editing is not None


def load_started(state: BoardState) -> Tuple[BoardState, int]:
    """Begin a fetch. Returns the new state and the request's sequence number."""
    sequence = state.last_issued + 1
    return replace(state, fetching=True, last_issued=sequence), sequence


def load_succeeded(state: BoardState, sequence: int, flights: Sequence[FlightRecord]) -> BoardState:
    """Apply a fetched list unless a newer result was already applied."""
    if sequence <= state.last_applied:
        return state
    return replace(
        state,
        flights=tuple(flights),
        has_loaded=True,
        fetching=sequence < state.last_issued,
        error=None,
        stale=False,
        last_applied=sequence,
    )


def load_failed(state: BoardState, sequence: int, message: str) -> BoardState:
    """
    Record a failed fetch unless a newer result was already applied.

    The previous list is kept; the error view takes precedence until a
    later fetch succeeds.
    """
    if sequence <= state.last_applied:
        return state
    return replace(
        state,
        fetching=sequence < state.last_issued,
        error=message,
        last_applied=sequence,
    )


def mutation_succeeded(state: BoardState) -> BoardState:
    """Invalidate the cached list after a create, update or delete."""
    return replace(state, stale=True)


def open_create(state: BoardState) -> BoardState:
    return replace(state, modal_open=True, editing=None, draft=FlightDraft())


def open_edit(state: BoardState, flight: FlightRecord) -> BoardState:
    """Open the modal with the draft prefilled from ``flight``."""
    return replace(state, modal_open=True, editing=flight, draft=FlightDraft.from_record(flight))


def close_modal(state: BoardState) -> BoardState:
    """Close the modal and reset the draft to empty defaults."""
    return replace(state, modal_open=False, editing=None, draft=FlightDraft())


def edit_draft(state: BoardState, **changes) -> BoardState:
    """
    Change draft fields.

    Raises TypeError for a name that is not a draft field.
    """
    return replace(state, draft=replace(state.draft, **changes))


def submit_succeeded(state: BoardState) -> BoardState:
    return close_modal(mutation_succeeded(state))


def view_mode(state: BoardState) -> ViewMode:
    if not state.has_loaded and state.error is None:
        return ViewMode.LOADING
    if state.error is not None:
        return ViewMode.ERROR
    if not state.flights:
        return ViewMode.EMPTY
    return ViewMode.LIST
