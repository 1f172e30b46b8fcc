"""Cancellation token passed into every blocking wait."""

from __future__ import annotations

import threading

from .errors import OperationCancelled


class CancellationToken:
    """Cooperative cancellation for retry and polling loops.

    Usage:
        token = CancellationToken()
        threading.Timer(5.0, token.cancel).start()

        wait_for(page_ready, timeout=30, cancel_token=token)

    Sleeping through the token wakes up as soon as ``cancel()`` is called
    and raises ``OperationCancelled`` instead of continuing the loop.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Operation cancelled")

    def sleep(self, seconds: float) -> None:
        """Block for ``seconds`` unless cancelled first.

        Raises:
            OperationCancelled: If the token is, or becomes, cancelled.
        """
        self.raise_if_cancelled()
        if self._event.wait(max(0.0, seconds)):
            raise OperationCancelled(f"Operation cancelled during {seconds:.3f}s wait")
