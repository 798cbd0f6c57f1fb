"""
Cancellation token passed into streaming calls.

The scheduler creates one token per turn and cancels it on stop(); backends
may await wait() or poll `cancelled` to abandon in-flight network work.
"""

import asyncio
from typing import Optional


class CancellationToken:
    """One-shot, idempotent cancellation signal."""

    def __init__(self):
        self._event: Optional[asyncio.Event] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        if self._cancelled:
            return
        # Created lazily so tokens can be built outside a running loop
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"
