# trai/voice_selection.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from trai.voices import CATALOG, VoiceCatalog, VoiceIdentity

MOOD_TO_VOICE: Dict[str, str] = {
    "excited": "Hope",
    "happy": "Hope",
    "calm": "Brian",
    "peaceful": "Charlotte",
    "reflective": "Brian",
    "contemplative": "James",
    "anxious": "Carla",
    "stressed": "Charlotte",
    "supportive": "Marcus",
    "professional": "James",
    "confident": "Bronson",
    "clear": "Alexandra",
    "neutral": "James",
}


def get_voice_by_preference(preference: str | None, catalog: VoiceCatalog = CATALOG) -> Optional[VoiceIdentity]:
    """First catalog voice whose display name contains the preference (case-insensitive)."""
    p = (preference or "").strip().lower()
    if not p:
        return None
    for voice in catalog:
        if p in voice.display_name.lower():
            return voice
    return None


def select_voice_for_mood(
    mood: str | None,
    user_preference: str | None = None,
    catalog: VoiceCatalog = CATALOG,
) -> VoiceIdentity:
    """Pick a voice: an explicit user preference always wins over the mood table.

    Unknown preferences and unmapped moods fall back to the catalog default.
    """
    preferred = get_voice_by_preference(user_preference, catalog)
    if preferred is not None:
        return preferred
    if user_preference and user_preference.strip():
        logging.info("Voice preference %r not in catalog; using mood mapping", user_preference)

    name = MOOD_TO_VOICE.get((mood or "").strip().lower())
    if name:
        voice = catalog.get_voice(name)
        if voice is not None:
            return voice
    return catalog.get_default_voice()


def get_voices_by_emotion(emotion: str, catalog: VoiceCatalog = CATALOG) -> List[VoiceIdentity]:
    # voices tagged with the emotion, plus the one the mood table routes it to
    e = (emotion or "").strip().lower()
    found = catalog.get_voices_by_tag(e)
    mapped = catalog.get_voice(MOOD_TO_VOICE.get(e, ""))
    if mapped is not None and mapped not in found:
        found.append(mapped)
    return found
