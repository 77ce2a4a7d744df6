"""
AI booking extraction: turns a typed or spoken request into a proposal.

The result is a ``ProposedBooking`` or None. Nothing the model returns is
trusted: callers merge the proposal into a ``BookingDraft``, which applies
the same validation as manual entry, and the store still runs the overlap
check on create.
"""

from typing import Optional

from pydantic import ValidationError

from studiobook.ai.client import StudioLLMClient
from studiobook.exceptions import LLMContractError, LLMUpstreamError
from studiobook.logging_context import get_request_logger, new_request_id
from studiobook.prompts.prompt_templates import build_extraction_prompt
from studiobook.prompts.system_prompts import EXTRACTION_SYSTEM_PROMPT
from studiobook.schemas.booking_schema import ProposedBooking
from studiobook.utils import today_iso

logger = get_request_logger(__name__)

UNDERSTAND_FAILURE_MESSAGE = (
    "Could not understand the booking request. Please try again or fill manually."
)


async def _extract(llm: StudioLLMClient, text: str, today: str) -> Optional[ProposedBooking]:
    data = await llm.complete_json(EXTRACTION_SYSTEM_PROMPT, build_extraction_prompt(text, today))
    try:
        proposal = ProposedBooking.model_validate(data)
    except ValidationError as e:
        raise LLMContractError(f"Extraction has the wrong shape: {e}") from e
    if proposal.is_empty():
        logger.info("Extraction produced no booking fields")
        return None
    return proposal


async def parse_booking_request(
    text: str,
    today: Optional[str] = None,
    llm: Optional[StudioLLMClient] = None,
) -> Optional[ProposedBooking]:
    """Extract a booking proposal from free text. Returns None on any failure."""
    if not text or not text.strip():
        return None
    new_request_id("fill")
    llm = llm or StudioLLMClient()
    try:
        proposal = await _extract(llm, text.strip(), today or today_iso())
    except (LLMUpstreamError, LLMContractError) as e:
        logger.error("Error parsing booking request: %s", e)
        return None
    if proposal is not None:
        logger.info("Extracted proposal fields: %s", sorted(proposal.model_dump(exclude_none=True)))
    return proposal


async def parse_voice_booking_request(
    audio: bytes,
    mime_type: str,
    today: Optional[str] = None,
    llm: Optional[StudioLLMClient] = None,
) -> Optional[ProposedBooking]:
    """Transcribe a voice request, then extract a proposal from the transcript."""
    if not audio:
        return None
    new_request_id("voice")
    llm = llm or StudioLLMClient()
    try:
        transcript = await llm.transcribe(audio, mime_type)
        logger.info("Voice request transcribed (%d chars)", len(transcript))
        return await _extract(llm, transcript, today or today_iso())
    except (LLMUpstreamError, LLMContractError) as e:
        logger.error("Error parsing voice booking: %s", e)
        return None
