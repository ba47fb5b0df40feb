# trai/emotional_context.py
from __future__ import annotations

import random
from enum import Enum
from typing import Dict, List, Optional, Tuple


class EmotionalContext(str, Enum):
    crisis = "crisis"
    calming = "calming"
    comforting = "comforting"
    energizing = "energizing"
    supportive = "supportive"
    neutral = "neutral"


# Ordered tiers: the first tier with any matching keyword wins, regardless of how
# many keywords later tiers match. Matching is a plain lowercase substring test,
# so "harm" also fires inside "pharmaceutical".
KEYWORD_TIERS: Tuple[Tuple[EmotionalContext, Tuple[str, ...]], ...] = (
    (EmotionalContext.crisis, ("crisis", "emergency", "help", "suicide", "harm", "danger", "panic", "overwhelmed")),
    (EmotionalContext.calming, ("anxious", "stressed", "worried", "nervous", "upset", "angry", "frustrated")),
    (EmotionalContext.comforting, ("sad", "lonely", "hurt", "pain", "loss", "grief", "cry", "depressed")),
    (EmotionalContext.energizing, ("goal", "motivation", "achieve", "success", "progress", "excited", "happy")),
)

PRIOR_EMOTION_CONTEXT: Dict[str, EmotionalContext] = {
    "sad": EmotionalContext.comforting,
    "grief": EmotionalContext.comforting,
    "lonely": EmotionalContext.comforting,
    "anxious": EmotionalContext.calming,
    "stressed": EmotionalContext.calming,
    "angry": EmotionalContext.calming,
    "happy": EmotionalContext.energizing,
    "excited": EmotionalContext.energizing,
    "motivated": EmotionalContext.energizing,
    "crisis": EmotionalContext.crisis,
    "panic": EmotionalContext.crisis,
}

DEFAULT_CONTEXT = EmotionalContext.supportive


def matching_tier(message: str | None) -> Optional[EmotionalContext]:
    t = (message or "").lower()
    if not t.strip():
        return None
    for context, keywords in KEYWORD_TIERS:
        if any(k in t for k in keywords):
            return context
    return None


def detect_emotional_context(message: str | None, prior_emotion: str | None = None) -> EmotionalContext:
    """Classify a chat message into a coarse emotional context.

    Keyword tiers are checked first (crisis, calming, comforting, energizing).
    When none match, a known prior emotion label is mapped through
    PRIOR_EMOTION_CONTEXT; otherwise the result is ``supportive``.
    """
    context = matching_tier(message)
    if context is not None:
        return context
    if prior_emotion:
        mapped = PRIOR_EMOTION_CONTEXT.get(prior_emotion.strip().lower())
        if mapped is not None:
            return mapped
    return DEFAULT_CONTEXT


# --- Reply framing ---
RESPONSE_OPENERS: Dict[EmotionalContext, List[str]] = {
    EmotionalContext.comforting: [
        "I understand how difficult this must be for you.",
        "I can hear the pain in your words.",
        "It's completely natural to feel this way.",
        "You're being so brave by sharing this.",
    ],
    EmotionalContext.calming: [
        "Let's take this one step at a time.",
        "I want you to know you're safe here.",
        "Take a deep breath with me.",
        "It's okay to feel overwhelmed.",
    ],
    EmotionalContext.energizing: [
        "I can sense your determination!",
        "That's such a positive step forward!",
        "Your enthusiasm is wonderful to hear.",
        "You're making incredible progress!",
    ],
    EmotionalContext.supportive: [
        "I'm here with you through this.",
        "You don't have to face this alone.",
        "I believe in your strength.",
        "Thank you for trusting me with this.",
    ],
    EmotionalContext.crisis: [
        "I want you to know that I'm here for you right now.",
        "Your safety is the most important thing.",
        "You've taken a brave step by reaching out.",
        "Let's focus on getting you the support you need.",
    ],
}

# below this intensity a reply is spoken as-is
FRAMING_THRESHOLD = 0.3


def frame_response(reply: str, context: EmotionalContext, intensity: float = 1.0) -> str:
    if context == EmotionalContext.neutral or intensity < FRAMING_THRESHOLD:
        return reply
    opener = random.choice(RESPONSE_OPENERS[context])
    if not reply:
        return opener
    return f"{opener} {reply}"
