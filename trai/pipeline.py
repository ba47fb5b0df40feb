# trai/pipeline.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from trai.crisis import CrisisAnalysis
from trai.crisis_gate import CrisisAlertPresentation, present_crisis_alert
from trai.emotional_context import EmotionalContext, detect_emotional_context, frame_response
from trai.voice_selection import select_voice_for_mood
from trai.voice_synthesis import ResolvedSynthesisParameters, synthesize
from trai.voices import VoiceIdentity


class VoicePlan(BaseModel):
    context: EmotionalContext
    voice: VoiceIdentity
    parameters: ResolvedSynthesisParameters
    reply: Optional[str] = None
    alert: CrisisAlertPresentation


def plan_voice_response(
    message: str,
    prior_emotion: str | None = None,
    mood: str | None = None,
    voice_preference: str | None = None,
    intensity: float = 1.0,
    reply: str | None = None,
    crisis_analysis: CrisisAnalysis | None = None,
) -> VoicePlan:
    """Run one chat message through context, voice and alert decisions.

    The mood label used for voice selection is ``mood`` when given, else the
    prior emotion, else "neutral". ConfigurationError from synthesis propagates.
    """
    context = detect_emotional_context(message, prior_emotion)
    voice = select_voice_for_mood(mood or prior_emotion or "neutral", voice_preference)
    parameters = synthesize(voice.display_name, context, intensity)
    framed = frame_response(reply, context, intensity) if reply is not None else None
    return VoicePlan(
        context=context,
        voice=voice,
        parameters=parameters,
        reply=framed,
        alert=present_crisis_alert(crisis_analysis),
    )
