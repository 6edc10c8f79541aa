"""
Bulk dispatch engine.
Chunks a recipient list, sends chunk by chunk through the outbound
sender and folds per-chunk failures into a single DispatchResult.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from billing.domain.models.base import ConfigurationError, ValidationError, TransportError
from billing.domain.models.dispatch import (
    ChunkResult,
    DispatchRequest,
    DispatchResult,
    FailedRecipient,
    ReasonCode,
)
from billing.domain.models.value_objects import EmailAddress
from billing.domain.events.base import EventDispatcher
from billing.domain.events.dispatch_events import BulkDispatchCompleted
from .message_service import OutboundMessageSender, TemplateRenderer


logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation, checked by the engine between chunks."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def chunk_recipients(recipients: Sequence[str], chunk_size: int) -> List[List[str]]:
    """Split into ordered chunks of at most chunk_size."""
    if chunk_size < 1:
        raise ConfigurationError("Chunk size must be at least 1", "chunk_size")
    return [list(recipients[i:i + chunk_size]) for i in range(0, len(recipients), chunk_size)]


class BulkDispatchEngine:
    """
    Sends one message to many recipients.

    Chunks go out strictly one after another. A failing chunk never stops
    the loop; its recipients are recorded and the next chunk is sent.
    """

    def __init__(
        self,
        sender: OutboundMessageSender,
        renderer: Optional[TemplateRenderer] = None,
        default_chunk_size: int = 100,
        max_chunk_size: int = 100,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        if max_chunk_size < 1:
            raise ConfigurationError("Maximum chunk size must be at least 1", "dispatch_max_chunk_size")
        if not 1 <= default_chunk_size <= max_chunk_size:
            raise ConfigurationError(
                f"Default chunk size must be between 1 and {max_chunk_size}",
                "dispatch_default_chunk_size"
            )
        self.sender = sender
        self.renderer = renderer
        self.default_chunk_size = default_chunk_size
        self.max_chunk_size = max_chunk_size
        self.event_dispatcher = event_dispatcher

    def prepare(self, request: DispatchRequest) -> tuple:
        """
        Pre-flight checks. Returns (chunk_size, body) or raises before
        anything is sent.
        """
        if not request.subject or not request.subject.strip():
            raise ConfigurationError("Message subject is required", "subject")

        chunk_size = request.chunk_size if request.chunk_size is not None else self.default_chunk_size
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or not 1 <= chunk_size <= self.max_chunk_size:
            raise ConfigurationError(
                f"Chunk size must be between 1 and {self.max_chunk_size}, got {chunk_size!r}",
                "chunk_size"
            )

        if not request.recipients:
            raise ValidationError("At least one recipient is required", "recipients")

        invalid = [r for r in request.recipients if not EmailAddress.is_valid(r)]
        if invalid:
            preview = ", ".join(repr(r) for r in invalid[:5])
            raise ValidationError(
                f"{len(invalid)} invalid recipient address(es): {preview}",
                "recipients"
            )

        body = self._render_body(request)
        if not body or not body.strip():
            raise ConfigurationError("Message body is required", "body_template")

        return chunk_size, body

    def _render_body(self, request: DispatchRequest) -> str:
        if request.template_id is None:
            return request.body_template
        if self.renderer is None:
            raise ConfigurationError(
                f"No template renderer configured for template '{request.template_id}'",
                "template_id"
            )
        return self.renderer.render(request.template_id, request.variables)

    async def dispatch(
        self,
        request: DispatchRequest,
        cancellation: Optional[CancellationToken] = None
    ) -> DispatchResult:
        """
        Send the request and return the aggregated result.

        Pre-flight errors are raised. Send-time failures are recorded per
        recipient. Cancellation stops new chunks and returns what was
        already attempted.
        """
        chunk_size, body = self.prepare(request)
        chunks = chunk_recipients(request.recipients, chunk_size)
        result = DispatchResult()

        logger.info(
            f"Dispatching '{request.subject}' to {len(request.recipients)} recipients "
            f"in {len(chunks)} chunk(s) of up to {chunk_size}"
        )

        for index, chunk in enumerate(chunks, start=1):
            if cancellation is not None and cancellation.cancelled:
                result.cancelled = True
                logger.warning(
                    f"Dispatch cancelled before chunk {index}/{len(chunks)}; "
                    f"{len(request.recipients) - result.attempted} recipients not attempted"
                )
                break

            result.chunks_attempted += 1
            result.attempted += len(chunk)

            try:
                chunk_result = await self.sender.send_chunk(chunk, request.subject, body)
            except asyncio.CancelledError:
                self._record_transport_failure(result, chunk, "Send cancelled")
                result.cancelled = True
                logger.warning(f"Dispatch cancelled during chunk {index}/{len(chunks)}")
                break
            except TransportError as exc:
                self._record_transport_failure(result, chunk, exc.message)
                logger.error(f"Chunk {index}/{len(chunks)} failed at transport level: {exc.message}")
                continue
            except Exception as exc:
                self._record_transport_failure(result, chunk, str(exc) or type(exc).__name__)
                logger.exception(f"Chunk {index}/{len(chunks)} failed with unexpected sender error")
                continue

            self._record_rejections(result, chunk, chunk_result, index, len(chunks))

        self._log_summary(request, result)
        await self._publish(request, result)
        return result

    def _record_transport_failure(self, result: DispatchResult, chunk: List[str], detail: str) -> None:
        result.failed.extend(
            FailedRecipient(recipient, ReasonCode.TRANSPORT_ERROR, detail) for recipient in chunk
        )

    def _record_rejections(
        self,
        result: DispatchResult,
        chunk: List[str],
        chunk_result: Optional[ChunkResult],
        index: int,
        total: int
    ) -> None:
        rejected = dict(chunk_result.rejected) if chunk_result is not None else {}
        if not rejected:
            return

        in_chunk = set(chunk)
        unknown = [r for r in rejected if r not in in_chunk]
        if unknown:
            logger.warning(f"Provider rejected {len(unknown)} address(es) not in chunk {index}; ignored")

        failures = [
            FailedRecipient(recipient, ReasonCode.PROVIDER_ERROR, rejected[recipient])
            for recipient in chunk
            if recipient in rejected
        ]
        result.failed.extend(failures)
        logger.warning(f"Provider rejected {len(failures)} of {len(chunk)} recipients in chunk {index}/{total}")

    def _log_summary(self, request: DispatchRequest, result: DispatchResult) -> None:
        message = (
            f"Dispatch '{request.subject}' finished: {result.overall.value}, "
            f"{result.succeeded}/{result.attempted} delivered over {result.chunks_attempted} chunk(s)"
        )
        if result.cancelled:
            message += " (cancelled)"
        if result.failed:
            logger.warning(message)
        else:
            logger.info(message)

    async def _publish(self, request: DispatchRequest, result: DispatchResult) -> None:
        if self.event_dispatcher is None:
            return
        await self.event_dispatcher.dispatch(BulkDispatchCompleted(
            subject=request.subject,
            attempted=result.attempted,
            succeeded=result.succeeded,
            overall=result.overall.value,
            chunks_attempted=result.chunks_attempted,
            cancelled=result.cancelled,
            failed_recipients=result.failed_recipients,
        ))
