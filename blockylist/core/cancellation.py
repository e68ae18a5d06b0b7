import threading
import time
from typing import Optional

from .errors import RunCancelled


class CancelToken:
    """
    Run-scoped cancellation flag with an optional deadline.

    The token is shared by every thread working on the same materialization
    run. Remote calls check it before they are issued, and use remaining()
    to bound their own timeout.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._deadline: Optional[float] = None
        if timeout:
            self._deadline = time.monotonic() + timeout

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self, default: float) -> float:
        """Seconds left before the deadline, capped at `default`."""
        if self._deadline is None:
            return default
        return max(0.0, min(default, self._deadline - time.monotonic()))

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RunCancelled("Materialization cancelled.")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise RunCancelled("Materialization deadline exceeded.")
