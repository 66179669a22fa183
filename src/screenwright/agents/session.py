"""One cancellable generation at a time, per agent."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable
from typing import Protocol

from screenwright.agents.cancellation import CancellationToken
from screenwright.agents.client import GenerationClient
from screenwright.agents.models import (
    AgentKind,
    GenerationOutcome,
    GenerationRequest,
    OutcomeStatus,
)
from screenwright.config import get_logger
from screenwright.exceptions import GenerationCancelledError, GenerationError
from screenwright.validation.models import ContentValidation

logger = get_logger(__name__)

Postprocess = Callable[[str], ContentValidation]
CreditsListener = Callable[[], None]

EMPTY_CONTENT_MESSAGE = "No valid content returned"
CANCELLED_MESSAGE = "Generation cancelled"


class Notifier(Protocol):
    """User-facing notification sink (toasts in an editor, a console in the CLI)."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that only writes to the structured log."""

    def success(self, message: str) -> None:
        logger.info(message, level="success")

    def error(self, message: str) -> None:
        logger.error(message)

    def info(self, message: str) -> None:
        logger.info(message)


class AgentSession:
    """Runs generations for one agent with at most one request in flight.

    Starting a run cancels the previous one. A response that arrives after
    cancellation is dropped. Failures never yield partial content and are
    not retried.
    """

    def __init__(
        self,
        agent: AgentKind,
        client: GenerationClient,
        notifier: Notifier | None = None,
        failure_message: str = "Failed to generate content",
    ) -> None:
        """Initialize the session.

        Args:
            agent: Agent this session generates for
            client: Streaming generation client
            notifier: Where success and error messages are shown
            failure_message: Message used when a transport error has none
        """
        self.agent = agent
        self.client = client
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.failure_message = failure_message
        self._token: CancellationToken | None = None
        self._credits_listeners: list[CreditsListener] = []

    @property
    def in_flight(self) -> bool:
        """Whether a generation is currently running."""
        return self._token is not None and not self._token.cancelled

    def add_credits_listener(self, listener: CreditsListener) -> None:
        """Register a callback fired after each successful generation."""
        self._credits_listeners.append(listener)

    def remove_credits_listener(self, listener: CreditsListener) -> None:
        """Unregister a credits callback."""
        if listener in self._credits_listeners:
            self._credits_listeners.remove(listener)

    def _emit_credits_changed(self) -> None:
        for listener in list(self._credits_listeners):
            try:
                listener()
            except Exception as e:
                logger.warning(
                    "Credits listener failed", agent=self.agent.value, error=str(e)
                )

    def cancel(self) -> bool:
        """Abort the in-flight generation.

        Returns:
            True if a generation was running and has been cancelled
        """
        token = self._token
        if token is None or token.cancelled:
            return False
        token.cancel()
        logger.info("Generation cancelled", agent=self.agent.value)
        self.notifier.info(CANCELLED_MESSAGE)
        return True

    def _outcome(
        self,
        status: OutcomeStatus,
        message: str,
        errors: list[str] | None = None,
        raw_response: str = "",
    ) -> GenerationOutcome:
        return GenerationOutcome(
            agent=self.agent,
            status=status,
            message=message,
            errors=errors or [],
            raw_response=raw_response,
        )

    async def _collect(
        self, request: GenerationRequest, token: CancellationToken
    ) -> str:
        chunks: list[str] = []
        async for chunk in self.client.stream(request):
            token.raise_if_cancelled()
            chunks.append(chunk)
        return "".join(chunks)

    async def _stream_until_cancelled(
        self, request: GenerationRequest, token: CancellationToken
    ) -> str:
        """Collect the response, aborting the stream as soon as the token fires."""
        collect = asyncio.ensure_future(self._collect(request, token))
        cancelled = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait(
                {collect, cancelled}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            cancelled.cancel()

        if not collect.done():
            collect.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await collect
            raise GenerationCancelledError()
        return collect.result()

    async def run(
        self,
        request: GenerationRequest,
        postprocess: Postprocess,
        success_message: str = "Content generated",
    ) -> GenerationOutcome:
        """Stream one generation and turn it into editor-ready text.

        Args:
            request: Request sent to the backend
            postprocess: Validates the full response and renders its content
            success_message: Message shown once the content is ready

        Returns:
            The outcome; ``content`` is only set on success
        """
        if self._token is not None:
            self._token.cancel()
        token = CancellationToken()
        self._token = token

        logger.info(
            "Starting generation", agent=self.agent.value, model=request.model_id
        )
        try:
            raw = await self._stream_until_cancelled(request, token)
        except GenerationCancelledError:
            return self._outcome(OutcomeStatus.CANCELLED, CANCELLED_MESSAGE)
        except GenerationError as e:
            if token.cancelled:
                return self._outcome(OutcomeStatus.CANCELLED, CANCELLED_MESSAGE)
            message = e.message or self.failure_message
            logger.error(
                "Generation failed",
                agent=self.agent.value,
                error=message,
                status_code=e.status_code,
            )
            self.notifier.error(message)
            return self._outcome(OutcomeStatus.TRANSPORT_ERROR, message, [message])
        finally:
            if self._token is token:
                self._token = None

        if token.cancelled:
            logger.debug("Dropping response after cancellation", agent=self.agent.value)
            return self._outcome(
                OutcomeStatus.CANCELLED, CANCELLED_MESSAGE, raw_response=raw
            )

        validation = postprocess(raw)
        if not validation.valid:
            message = f"Invalid response: {validation.first_error}"
            logger.warning(
                "Response validation failed",
                agent=self.agent.value,
                errors=validation.errors,
            )
            self.notifier.error(message)
            return self._outcome(
                OutcomeStatus.VALIDATION_ERROR,
                message,
                validation.errors,
                raw_response=raw,
            )

        if not validation.content.strip():
            self.notifier.error(EMPTY_CONTENT_MESSAGE)
            return self._outcome(
                OutcomeStatus.EMPTY_CONTENT,
                EMPTY_CONTENT_MESSAGE,
                [EMPTY_CONTENT_MESSAGE],
                raw_response=raw,
            )

        logger.info(
            "Generation succeeded",
            agent=self.agent.value,
            characters=len(validation.content),
        )
        self.notifier.success(success_message)
        self._emit_credits_changed()
        return GenerationOutcome(
            agent=self.agent,
            status=OutcomeStatus.SUCCESS,
            content=validation.content,
            message=success_message,
            raw_response=raw,
        )
