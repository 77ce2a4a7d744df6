"""Read-only AI assistant chat and dashboard summary over the booking collection."""

from typing import Iterable, Optional

from studiobook.ai.client import StudioLLMClient
from studiobook.exceptions import LLMContractError, LLMUpstreamError
from studiobook.logging_context import get_request_logger, new_request_id
from studiobook.prompts.prompt_templates import build_assistant_prompt, build_summary_prompt
from studiobook.prompts.system_prompts import ASSISTANT_SYSTEM_PROMPT, SUMMARY_SYSTEM_PROMPT
from studiobook.schemas.booking_schema import Booking
from studiobook.utils import today_iso

logger = get_request_logger(__name__)

ASSISTANT_FAILURE_MESSAGE = "Sorry, I'm having trouble connecting to the brain right now."
ASSISTANT_EMPTY_MESSAGE = "I'm sorry, I couldn't process that."
NO_SESSIONS_MESSAGE = "No sessions to summarize."
SUMMARY_FAILURE_MESSAGE = "Could not generate summary."


async def ask_studio_assistant(
    query: Optional[str],
    audio: Optional[bytes],
    bookings: Iterable[Booking],
    today: Optional[str] = None,
    mime_type: str = "audio/webm",
    llm: Optional[StudioLLMClient] = None,
) -> str:
    """
    Answer a question about the schedule, asked as text or as audio.

    Audio wins over text when both are given. Failures come back as a
    friendly message, never as an exception.
    """
    new_request_id("ask")
    llm = llm or StudioLLMClient()
    bookings = list(bookings)
    try:
        if audio:
            question = await llm.transcribe(audio, mime_type)
            logger.info("Assistant question received via audio")
        elif query and query.strip():
            question = query.strip()
        else:
            return ASSISTANT_EMPTY_MESSAGE
        prompt = build_assistant_prompt(question, bookings, today or today_iso())
        return await llm.complete_text(ASSISTANT_SYSTEM_PROMPT, prompt)
    except LLMContractError as e:
        logger.warning("Assistant returned nothing usable: %s", e)
        return ASSISTANT_EMPTY_MESSAGE
    except LLMUpstreamError as e:
        logger.error("Ask AI error: %s", e)
        return ASSISTANT_FAILURE_MESSAGE


async def generate_session_summary(
    bookings: Iterable[Booking],
    llm: Optional[StudioLLMClient] = None,
) -> str:
    """Two-sentence performance summary of the given bookings."""
    prompt = build_summary_prompt(bookings)
    if prompt is None:
        return NO_SESSIONS_MESSAGE
    new_request_id("summary")
    llm = llm or StudioLLMClient()
    try:
        return await llm.complete_text(SUMMARY_SYSTEM_PROMPT, prompt)
    except (LLMUpstreamError, LLMContractError) as e:
        logger.warning("Summary unavailable: %s", e)
        return SUMMARY_FAILURE_MESSAGE
