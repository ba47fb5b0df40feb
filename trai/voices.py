# trai/voices.py
"""Registry of the ElevenLabs voices the companion can speak with.

The catalog is built once at import time and never mutated. Lookups by name are
case-insensitive and fall back to the default voice instead of raising.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Optional, Tuple, FrozenSet

from pydantic import BaseModel, ConfigDict

from trai.errors import ConfigurationError


class Gender(str, Enum):
    male = "male"
    female = "female"


class VoiceIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # provider voice key
    display_name: str
    gender: Gender
    tags: FrozenSet[str] = frozenset()
    description: str = ""
    accent: str = "American"
    is_default: bool = False


VOICES: Tuple[VoiceIdentity, ...] = (
    VoiceIdentity(
        id="EkK5I93UQWFDigLMpZcX",
        display_name="James",
        gender=Gender.male,
        tags=frozenset({"professional", "calming", "therapeutic"}),
        description="Professional and calming",
        is_default=True,
    ),
    VoiceIdentity(
        id="nPczCjzI2devNBz1zQrb",
        display_name="Brian",
        gender=Gender.male,
        tags=frozenset({"deep", "resonant", "grounding"}),
        description="Deep and resonant",
    ),
    VoiceIdentity(
        id="kdmDKE6EkgrWrrykO9Qt",
        display_name="Alexandra",
        gender=Gender.female,
        tags=frozenset({"clear", "articulate", "professional"}),
        description="Clear and articulate",
    ),
    VoiceIdentity(
        id="l32B8XDoylOsZKiSdfhE",
        display_name="Carla",
        gender=Gender.female,
        tags=frozenset({"warm", "empathetic", "caring"}),
        description="Warm and empathetic",
    ),
    VoiceIdentity(
        id="s3WpFb3KxhwHdqCNjxE1",
        display_name="Hope",
        gender=Gender.female,
        tags=frozenset({"warm", "encouraging", "uplifting"}),
        description="Warm and encouraging",
    ),
    VoiceIdentity(
        id="XB0fDUnXU5powFXDhCwa",
        display_name="Charlotte",
        gender=Gender.female,
        tags=frozenset({"gentle", "empathetic", "soothing"}),
        description="Gentle and empathetic",
    ),
    VoiceIdentity(
        id="Yko7PKHZNXotIFUBG7I9",
        display_name="Bronson",
        gender=Gender.male,
        tags=frozenset({"confident", "reassuring", "supportive"}),
        description="Confident and reassuring",
    ),
    VoiceIdentity(
        id="y3kKRaK2dnn3OgKDBckk",
        display_name="Marcus",
        gender=Gender.male,
        tags=frozenset({"smooth", "supportive", "understanding"}),
        description="Smooth and supportive",
    ),
)


class VoiceCatalog:
    """Read-only view over a fixed tuple of voices with exactly one default."""

    def __init__(self, voices: Iterable[VoiceIdentity]):
        self._voices: Tuple[VoiceIdentity, ...] = tuple(voices)
        defaults = [v for v in self._voices if v.is_default]
        if len(defaults) != 1:
            raise ConfigurationError(
                f"voice catalog must flag exactly one default voice, found {len(defaults)}"
            )
        self._default = defaults[0]
        self._by_name = {v.display_name.lower(): v for v in self._voices}

    def __iter__(self):
        return iter(self._voices)

    def __len__(self) -> int:
        return len(self._voices)

    @property
    def voices(self) -> Tuple[VoiceIdentity, ...]:
        return self._voices

    def get_default_voice(self) -> VoiceIdentity:
        return self._default

    def get_voice(self, name: str | None) -> Optional[VoiceIdentity]:
        if not name:
            return None
        return self._by_name.get(name.strip().lower())

    def get_voice_id(self, name: str | None) -> str:
        voice = self.get_voice(name)
        if voice is None:
            logging.info("Unknown voice name %r; using default %s", name, self._default.display_name)
            return self._default.id
        return voice.id

    def get_voices_by_gender(self, gender: Gender | str) -> List[VoiceIdentity]:
        g = gender.value if isinstance(gender, Gender) else str(gender).strip().lower()
        return [v for v in self._voices if v.gender.value == g]

    def get_voices_by_tag(self, tag: str) -> List[VoiceIdentity]:
        t = (tag or "").strip().lower()
        return [v for v in self._voices if t in v.tags]

    def all_voice_names(self) -> List[str]:
        return [v.display_name for v in self._voices]


CATALOG = VoiceCatalog(VOICES)


def get_voice_id(name: str | None) -> str:
    return CATALOG.get_voice_id(name)


def get_voices_by_gender(gender: Gender | str) -> List[VoiceIdentity]:
    return CATALOG.get_voices_by_gender(gender)


def get_default_voice() -> VoiceIdentity:
    return CATALOG.get_default_voice()
