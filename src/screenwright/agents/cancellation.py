"""Cooperative cancellation for in-flight generations."""

from __future__ import annotations

import asyncio

from screenwright.exceptions import GenerationCancelledError


class CancellationToken:
    """Abort flag shared between an agent session and its stream.

    Cancelling only stops this process from reading and applying the
    response; the backend may still finish (and bill) the request.
    """

    def __init__(self) -> None:
        """Initialize an uncancelled token."""
        self._event = asyncio.Event()

    def cancel(self) -> None:
        """Mark the generation as cancelled."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        """Raise GenerationCancelledError if the token was cancelled."""
        if self.cancelled:
            raise GenerationCancelledError()
