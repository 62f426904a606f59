from __future__ import annotations

import logging
import threading
from typing import Callable


class OnlineLobby:
    """
    Simulated matchmaking: after a fixed delay an opponent is "found".

    There is no network rendezvous; the lobby is a cancellable timer that
    calls on_match_found once.
    """

    def __init__(self, delay_s: float, on_match_found: Callable[[], None]):
        self.delay_s = delay_s
        self.on_match_found = on_match_found
        self._timer: threading.Timer | None = None
        self._done = threading.Event()
        self.matched = False
        self.cancelled = False

    def _fire(self) -> None:
        if self.cancelled:
            return
        self.matched = True
        logging.info("Opponent found")
        try:
            self.on_match_found()
        finally:
            self._done.set()

    def search(self) -> None:
        """Start searching; calling it again while searching has no effect."""
        if self._timer is not None:
            return
        logging.info(f"Searching for an opponent ({self.delay_s:.1f}s)")
        self._timer = threading.Timer(self.delay_s, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def cancel(self) -> None:
        """Stop searching (back to the menu)."""
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        self._done.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until matched or cancelled. Returns True when matched."""
        self._done.wait(timeout)
        return self.matched
