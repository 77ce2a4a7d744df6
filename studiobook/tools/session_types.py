"""Session type catalog with descriptions and spoken/typed aliases."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

SESSION_CATALOG: dict[str, dict] = {
    "Vocal Recording": {
        "description": "Tracking vocals in the booth with an engineer.",
        "typical_duration": "1-3 hours",
    },
    "Music Production": {
        "description": "Beat making, arrangement and full track production.",
        "typical_duration": "2-6 hours",
    },
    "Mixing & Mastering": {
        "description": "Balancing, processing and finalising recorded tracks.",
        "typical_duration": "2-4 hours",
    },
    "Dubbing": {
        "description": "Voice-over and film dubbing against picture.",
        "typical_duration": "1-4 hours",
    },
    "Jamming": {
        "description": "Band rehearsal and live jam in the main room.",
        "typical_duration": "1-3 hours",
    },
    "Podcast": {
        "description": "Multi-mic podcast or interview recording.",
        "typical_duration": "1-2 hours",
    },
}

SESSION_ALIASES: dict[str, str] = {
    "vocal": "Vocal Recording", "vocals": "Vocal Recording", "singing": "Vocal Recording",
    "song recording": "Vocal Recording", "voice recording": "Vocal Recording",
    "production": "Music Production", "beat": "Music Production", "beats": "Music Production",
    "mixing": "Mixing & Mastering", "mastering": "Mixing & Mastering", "mix": "Mixing & Mastering",
    "dub": "Dubbing", "voice over": "Dubbing", "voiceover": "Dubbing",
    "jam": "Jamming", "rehearsal": "Jamming", "band practice": "Jamming",
    "podcast": "Podcast", "interview": "Podcast",
}


def get_session_types() -> list[str]:
    """Return the catalog session types in display order."""
    return list(SESSION_CATALOG.keys())


def get_session_details(session_type: str) -> Optional[dict]:
    """Get catalog details for an exact or case-insensitive session type."""
    normalized = session_type.lower().strip()
    for name, info in SESSION_CATALOG.items():
        if name.lower() == normalized:
            return {"name": name, **info}
    return None


def match_session_type(query: str) -> Optional[str]:
    """Match a session type or alias to its catalog name. Returns None if no match.

    The whole text must equal a catalog name or an alias, ignoring case and
    extra whitespace; "Remix stems" is free text, not "mix".
    """
    normalized = " ".join(query.lower().split())
    if not normalized:
        return None
    for name in SESSION_CATALOG:
        if name.lower() == normalized:
            return name
    return SESSION_ALIASES.get(normalized)


def normalize_session_type(value: str) -> str:
    """Canonicalize a session type, keeping unknown free text as typed."""
    matched = match_session_type(value)
    if matched is None:
        logger.debug("Session type '%s' not in catalog, keeping as free text", value)
        return value.strip()
    return matched
