from studiobook.ai.assistant import ask_studio_assistant, generate_session_summary
from studiobook.ai.client import StudioLLMClient
from studiobook.ai.extraction import parse_booking_request, parse_voice_booking_request

__all__ = [
    "StudioLLMClient",
    "parse_booking_request",
    "parse_voice_booking_request",
    "ask_studio_assistant",
    "generate_session_summary",
]
