"""Turn the chat service's event generator into an SSE text stream.

The stream is bounded by the request timeout. Once the first byte has
gone out the status code can no longer change, so failures are reported
as a last ``error`` event after whatever tokens were already delivered.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from datetime import timedelta

from discbot.core.service.metrics import SSE_EVENTS_TOTAL, SSE_STREAM_OUTCOMES_TOTAL
from discbot.core.service.models import DiscbotError, ErrorEvent, StreamEvent
from discbot.infra.telemetry import ATTR_SSE_ERROR_CODE, SPAN_SSE_STREAM, tracer

from .models import format_error_sse, format_sse

logger = logging.getLogger(__name__)

OUTCOME_OK = "ok"
OUTCOME_TIMEOUT = "REQUEST_TIMEOUT"
OUTCOME_CANCELLED = "CANCELLED"
OUTCOME_UNEXPECTED = "PROCESSING_ERROR"


async def sse_stream(
    events: AsyncGenerator[StreamEvent, None],
    *,
    request_timeout: timedelta,
    send_traceback: bool = False,
) -> AsyncGenerator[str, None]:
    """Yield ``data: {...}`` frames for ``events``.

    Client disconnects cancel this generator; the cancellation is passed
    on to ``events`` so the in-flight completion stops too.
    """
    outcome = OUTCOME_OK
    with tracer.start_as_current_span(SPAN_SSE_STREAM) as span:
        try:
            async with asyncio.timeout(request_timeout.total_seconds()):
                async for event in events:
                    SSE_EVENTS_TOTAL.labels(event_type=event.type).inc()
                    yield format_sse(event)
        except DiscbotError as e:
            outcome = e.code
            logger.warning("Chat stream failed with %s: %s", e.code, e)
            yield format_error_sse(e, send_traceback=send_traceback)
        except TimeoutError:
            outcome = OUTCOME_TIMEOUT
            logger.warning("Chat stream exceeded %s", request_timeout)
            yield format_sse(ErrorEvent(message="Request timed out.", code=outcome))
        except asyncio.CancelledError:
            outcome = OUTCOME_CANCELLED
            logger.debug("Client went away mid-stream")
            raise
        except Exception as e:
            outcome = OUTCOME_UNEXPECTED
            span.record_exception(e)
            logger.exception("Unexpected error in chat stream")
            yield format_error_sse(e, send_traceback=send_traceback)
        finally:
            await events.aclose()
            span.set_attribute(ATTR_SSE_ERROR_CODE, outcome)
            SSE_STREAM_OUTCOMES_TOTAL.labels(code=outcome).inc()
