# trai/voice_synthesis.py
"""Per-voice synthesis settings and their emotional-context adjustments.

Only stability and style move with the context; similarity boost and speaker
boost always come from the voice's base settings so the timbre stays the same.
"""
from __future__ import annotations

from typing import Dict, Iterable

from pydantic import BaseModel, ConfigDict

from trai.emotional_context import EmotionalContext
from trai.errors import ConfigurationError
from trai.voices import CATALOG, VoiceIdentity


class VoiceSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    stability: float
    similarity_boost: float
    style: float
    speaker_boost: bool = True


class ContextAdjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    stability: float
    style: float


class VoiceSynthesisProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_voice_id: str
    base_settings: VoiceSettings
    context_adjustments: Dict[EmotionalContext, ContextAdjustment]


class ResolvedSynthesisParameters(BaseModel):
    voice_id: str
    stability: float
    similarity_boost: float
    style: float
    speaker_boost: bool


def _profile(voice_id: str, base: tuple, **adjustments: tuple) -> VoiceSynthesisProfile:
    stability, similarity_boost, style = base
    return VoiceSynthesisProfile(
        base_voice_id=voice_id,
        base_settings=VoiceSettings(stability=stability, similarity_boost=similarity_boost, style=style),
        context_adjustments={
            EmotionalContext(name): ContextAdjustment(stability=s, style=st)
            for name, (s, st) in adjustments.items()
        },
    )


# keyed by lowercase voice name; (stability, similarity_boost, style) then (stability, style) per context
VOICE_PROFILES: Dict[str, VoiceSynthesisProfile] = {
    "james": _profile(
        "EkK5I93UQWFDigLMpZcX", (0.5, 0.8, 0.6),
        comforting=(0.8, 0.4), energizing=(0.3, 0.9), calming=(0.9, 0.2), supportive=(0.6, 0.5), crisis=(0.9, 0.3),
    ),
    "brian": _profile(
        "nPczCjzI2devNBz1zQrb", (0.6, 0.7, 0.5),
        comforting=(0.7, 0.3), energizing=(0.4, 0.8), calming=(0.8, 0.2), supportive=(0.5, 0.6), crisis=(0.8, 0.2),
    ),
    "alexandra": _profile(
        "kdmDKE6EkgrWrrykO9Qt", (0.7, 0.8, 0.4),
        comforting=(0.9, 0.3), energizing=(0.4, 0.7), calming=(0.9, 0.1), supportive=(0.7, 0.4), crisis=(0.9, 0.2),
    ),
    "carla": _profile(
        "l32B8XDoylOsZKiSdfhE", (0.5, 0.9, 0.7),
        comforting=(0.8, 0.5), energizing=(0.2, 0.9), calming=(0.9, 0.3), supportive=(0.6, 0.6), crisis=(0.8, 0.4),
    ),
    "hope": _profile(
        "s3WpFb3KxhwHdqCNjxE1", (0.45, 0.8, 0.65),
        comforting=(0.75, 0.45), energizing=(0.25, 0.9), calming=(0.85, 0.25), supportive=(0.55, 0.6), crisis=(0.85, 0.3),
    ),
    "charlotte": _profile(
        "XB0fDUnXU5powFXDhCwa", (0.65, 0.85, 0.35),
        comforting=(0.9, 0.3), energizing=(0.4, 0.6), calming=(0.9, 0.15), supportive=(0.7, 0.4), crisis=(0.9, 0.2),
    ),
    "bronson": _profile(
        "Yko7PKHZNXotIFUBG7I9", (0.55, 0.75, 0.5),
        comforting=(0.7, 0.35), energizing=(0.35, 0.8), calming=(0.8, 0.2), supportive=(0.6, 0.5), crisis=(0.85, 0.25),
    ),
    "marcus": _profile(
        "y3kKRaK2dnn3OgKDBckk", (0.6, 0.8, 0.45),
        comforting=(0.8, 0.35), energizing=(0.4, 0.75), calming=(0.85, 0.2), supportive=(0.6, 0.5), crisis=(0.85, 0.25),
    ),
}


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _lerp(base: float, target: float, intensity: float) -> float:
    # weighted form keeps both endpoints exact
    return base * (1.0 - intensity) + target * intensity


def get_profile(voice_name: str, profiles: Dict[str, VoiceSynthesisProfile] | None = None) -> VoiceSynthesisProfile:
    table = VOICE_PROFILES if profiles is None else profiles
    profile = table.get((voice_name or "").strip().lower())
    if profile is None:
        raise ConfigurationError(f"no synthesis profile for voice {voice_name!r}")
    return profile


def synthesize(
    voice_name: str,
    context: EmotionalContext | str,
    intensity: float = 1.0,
    profiles: Dict[str, VoiceSynthesisProfile] | None = None,
) -> ResolvedSynthesisParameters:
    """Resolve TTS parameters for a voice speaking in an emotional context.

    ``intensity`` linearly blends the voice's base stability/style (0.0) toward
    the context adjustment (1.0). Outputs are clamped to [0, 1].
    Raises ConfigurationError when the voice has no profile, or the profile
    lacks an adjustment for the requested context.
    """
    profile = get_profile(voice_name, profiles)
    base = profile.base_settings
    ctx = EmotionalContext(context)

    if ctx == EmotionalContext.neutral:
        stability, style = base.stability, base.style
    else:
        adjustment = profile.context_adjustments.get(ctx)
        if adjustment is None:
            raise ConfigurationError(f"voice {voice_name!r} has no {ctx.value} adjustment")
        stability = _lerp(base.stability, adjustment.stability, intensity)
        style = _lerp(base.style, adjustment.style, intensity)

    return ResolvedSynthesisParameters(
        voice_id=profile.base_voice_id,
        stability=_clamp(stability),
        similarity_boost=_clamp(base.similarity_boost),
        style=_clamp(style),
        speaker_boost=base.speaker_boost,
    )


def validate_profiles(
    voices: Iterable[VoiceIdentity] = CATALOG,
    profiles: Dict[str, VoiceSynthesisProfile] | None = None,
) -> None:
    """Fail fast when a catalog voice cannot be synthesized in every context."""
    table = VOICE_PROFILES if profiles is None else profiles
    missing = [v.display_name for v in voices if v.display_name.lower() not in table]
    if missing:
        raise ConfigurationError(f"voices without synthesis profiles: {', '.join(missing)}")
    required = [c for c in EmotionalContext if c != EmotionalContext.neutral]
    for name, profile in table.items():
        gaps = [c.value for c in required if c not in profile.context_adjustments]
        if gaps:
            raise ConfigurationError(f"profile {name!r} missing adjustments: {', '.join(gaps)}")
