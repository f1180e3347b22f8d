"""
Terminal flight board.

Polls the API and reprints the board after every refresh.

Usage:
    python -m flight_tracker.client

Commands (type and press Enter):
    r   refresh now / retry after an error
    q   quit
"""

import logging
import sys

from flight_tracker.config import config
from flight_tracker.client.board import FlightBoard
from flight_tracker.client.display import render_board
from flight_tracker.client.poller import ListPoller
from flight_tracker.client.state import BoardState

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.WARNING,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)


def main() -> int:
    board = FlightBoard()
    color = sys.stdout.isatty()

    def on_change(state: BoardState) -> None:
        if state.fetching and state.has_loaded:
            return  # keep showing the current list during background refreshes
        print('\n' + '=' * 60)
        print(f'Flight Tracker  ({config.client.api_url})')
        print('=' * 60)
        print(render_board(state, color=color))

    board.add_listener(on_change)

    poller = ListPoller(board)
    poller.start_background()

    try:
        for line in sys.stdin:
            command = line.strip().lower()
            if command == 'q':
                break
            if command == 'r':
                board.refresh()
    except KeyboardInterrupt:
        pass
    finally:
        poller.stop()

    return 0


if __name__ == '__main__':
    sys.exit(main())
