# trai/crisis.py
from __future__ import annotations

import json
import logging
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from trai import config


class RiskLevel(str, Enum):
    none = "none"
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"

    @property
    def rank(self) -> int:
        return RISK_ORDER.index(self)


RISK_ORDER = [RiskLevel.none, RiskLevel.low, RiskLevel.medium, RiskLevel.high, RiskLevel.critical]


class CrisisAnalysis(BaseModel):
    risk_level: RiskLevel = RiskLevel.none
    indicators: List[str] = Field(default_factory=list)
    support_message: str = ""
    immediate_actions: List[str] = Field(default_factory=list)
    emergency_contacts: List[str] = Field(default_factory=list)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    check_in_scheduled: bool = False
    requires_check_in: bool = False
    analysis_reason: str = ""


# --- Crisis indicator families (lowercase substring match) ---
SUICIDAL = [
    "want to die", "kill myself", "end it all", "not worth living", "better off dead",
    "suicide", "suicidal", "hanging myself", "overdose", "jump off", "can't go on",
    "no point living", "tired of being alive", "wish i was dead", "ending my life",
]
SELF_HARM = [
    "cut myself", "hurt myself", "self harm", "cutting", "burning myself",
    "punish myself", "deserve pain", "blade", "razor", "self-injury",
]
SEVERE_DEPRESSION = [
    "hopeless", "worthless", "nothing matters", "can't handle", "giving up",
    "no future", "empty inside", "numb", "pointless", "burden to everyone",
    "complete failure", "lost everything", "can't cope", "falling apart",
]
ISOLATION = [
    "no one cares", "all alone", "nobody understands", "isolated", "abandoned",
    "no friends", "no family", "completely alone", "no support", "everyone left",
]
SUBSTANCE = [
    "drinking to forget", "drug to numb", "alcohol problem", "addiction",
    "overdosing", "pills to escape", "substance abuse", "getting high to cope",
]


def _normalize(text: str) -> str:
    return (text or "").lower().replace("’", "'")


def _escalate(current: RiskLevel, level: RiskLevel) -> RiskLevel:
    # only raises the level when nothing has been detected yet
    return level if current == RiskLevel.none else current


def detect_immediate_risk(message: str) -> CrisisAnalysis:
    """Pattern-match a message against the crisis indicator families."""
    t = _normalize(message)
    indicators: List[str] = []
    level = RiskLevel.none
    confidence = 0.0

    for phrase in SUICIDAL:
        if phrase in t:
            indicators.append(f'Suicidal language: "{phrase}"')
            level = RiskLevel.critical
            confidence = max(confidence, 0.9)

    for phrase in SELF_HARM:
        if phrase in t:
            indicators.append(f'Self-harm indication: "{phrase}"')
            if level != RiskLevel.critical:
                level = RiskLevel.high
            confidence = max(confidence, 0.8)

    depression = [p for p in SEVERE_DEPRESSION if p in t]
    indicators.extend(f'Depression indicator: "{p}"' for p in depression)
    if len(depression) >= 3:
        level = _escalate(level, RiskLevel.high)
        confidence = max(confidence, 0.7)
    elif depression:
        level = _escalate(level, RiskLevel.medium)
        confidence = max(confidence, 0.5)

    for phrase in ISOLATION:
        if phrase in t:
            indicators.append(f'Isolation indicator: "{phrase}"')
            level = _escalate(level, RiskLevel.medium)
            confidence = max(confidence, 0.4)

    for phrase in SUBSTANCE:
        if phrase in t:
            indicators.append(f'Substance abuse: "{phrase}"')
            level = _escalate(level, RiskLevel.medium)
            confidence = max(confidence, 0.6)

    reason = (
        f"Pattern matching detected {len(indicators)} crisis indicators"
        if indicators else "No immediate crisis indicators detected"
    )
    return build_analysis(level, indicators, confidence, reason)


def build_analysis(
    level: RiskLevel,
    indicators: Sequence[str] = (),
    confidence: float = 0.0,
    reason: str = "",
    requires_check_in: Optional[bool] = None,
) -> CrisisAnalysis:
    if requires_check_in is None:
        requires_check_in = level in (RiskLevel.high, RiskLevel.critical)
    return CrisisAnalysis(
        risk_level=level,
        indicators=list(indicators),
        support_message=support_message(level),
        immediate_actions=immediate_actions(level),
        emergency_contacts=emergency_contacts(level),
        confidence_score=max(0.0, min(1.0, confidence)),
        requires_check_in=requires_check_in,
        analysis_reason=reason,
    )


def combine_analyses(pattern: CrisisAnalysis, ai: Dict[str, Any]) -> CrisisAnalysis:
    """Merge pattern matching with a model's JSON verdict; the higher risk wins."""
    try:
        ai_level = RiskLevel(str(ai.get("riskLevel", "none")).lower())
    except ValueError:
        logging.warning("Model returned unknown risk level %r; ignoring it", ai.get("riskLevel"))
        ai_level = RiskLevel.none
    level = max(pattern.risk_level, ai_level, key=lambda r: r.rank)
    ai_indicators = [str(i) for i in (ai.get("indicators") or [])]
    try:
        ai_confidence = float(ai.get("confidenceScore") or 0.0)
    except (TypeError, ValueError):
        ai_confidence = 0.0
    requires = bool(ai.get("requiresCheckIn")) or level in (RiskLevel.high, RiskLevel.critical)
    return build_analysis(
        level,
        pattern.indicators + ai_indicators,
        max(pattern.confidence_score, ai_confidence),
        f"Combined analysis: {pattern.analysis_reason} | AI: {ai.get('analysisReason', '')}",
        requires_check_in=requires,
    )


def immediate_actions(level: RiskLevel) -> List[str]:
    if level == RiskLevel.critical:
        return [
            "Contact emergency services immediately (911)",
            "Go to the nearest emergency room",
            f"Call National Suicide Prevention Lifeline: {config.CRISIS_HOTLINE}",
            "Reach out to a trusted friend or family member immediately",
            "Remove any means of self-harm from your environment",
        ]
    if level == RiskLevel.high:
        return [
            "Contact a mental health professional today",
            f"Call National Suicide Prevention Lifeline: {config.CRISIS_HOTLINE}",
            "Reach out to someone you trust",
            "Consider going to an emergency room if feelings worsen",
            "Create a safety plan with specific coping strategies",
        ]
    if level == RiskLevel.medium:
        return [
            "Schedule an appointment with a mental health professional",
            "Talk to someone you trust about how you're feeling",
            "Practice grounding techniques and self-care",
            "Consider calling a mental health helpline",
            "Avoid isolation - stay connected with supportive people",
        ]
    if level == RiskLevel.low:
        return [
            "Practice self-care and stress management techniques",
            "Maintain regular sleep and exercise routines",
            "Stay connected with supportive friends and family",
            "Consider journaling or mindfulness practices",
        ]
    return []


def emergency_contacts(level: RiskLevel) -> List[str]:
    contacts: List[str] = []
    if level in (RiskLevel.high, RiskLevel.critical):
        contacts += [
            "Emergency Services: 911",
            f"National Suicide Prevention Lifeline: {config.CRISIS_HOTLINE}",
            "Crisis Text Line: Text HOME to 741741",
            "SAMHSA National Helpline: 1-800-662-4357",
        ]
    if level in (RiskLevel.medium, RiskLevel.high, RiskLevel.critical):
        contacts += [
            "National Alliance on Mental Illness (NAMI): 1-800-950-NAMI (6264)",
            "Mental Health America Crisis Resources: mhanational.org/find-support-groups",
        ]
    return contacts


SUPPORT_MESSAGES = {
    RiskLevel.critical: (
        "I'm very concerned about your safety right now. Your life has value and there are people who want to help. "
        "Please reach out to emergency services or a crisis helpline immediately. You don't have to go through this alone."
    ),
    RiskLevel.high: (
        "I can tell you're going through an incredibly difficult time. These feelings are overwhelming, but they can "
        "change with proper support. Please consider reaching out to a mental health professional or crisis helpline today."
    ),
    RiskLevel.medium: (
        "It sounds like you're dealing with some challenging emotions. These feelings are valid, and seeking support can "
        "make a real difference. Consider talking to someone you trust or a mental health professional."
    ),
    RiskLevel.low: (
        "I hear that you're going through a tough time. Remember that it's normal to have difficult periods, and taking "
        "care of your mental health is important."
    ),
}
DEFAULT_SUPPORT_MESSAGE = (
    "Thank you for sharing your thoughts with me. I'm here to support you in your wellness journey."
)


def support_message(level: RiskLevel) -> str:
    return SUPPORT_MESSAGES.get(level, DEFAULT_SUPPORT_MESSAGE)


# --- Follow-up check-ins ---
FOLLOW_UP_DELAYS = {
    RiskLevel.critical: timedelta(hours=2),
    RiskLevel.high: timedelta(hours=6),
    RiskLevel.medium: timedelta(hours=24),
}


def follow_up_delay(level: RiskLevel) -> Optional[timedelta]:
    return FOLLOW_UP_DELAYS.get(level)


def check_in_message(level: RiskLevel, hours_elapsed: int) -> str:
    if level == RiskLevel.critical:
        return (
            f"Hi, I wanted to check in with you after our earlier conversation. It's been {hours_elapsed} hours, "
            "and I'm concerned about your wellbeing. How are you feeling right now? Are you in a safe place?"
        )
    if level == RiskLevel.high:
        return (
            "I wanted to follow up on our conversation from earlier today. You were going through a difficult time, "
            "and I want to make sure you're okay. How are you feeling now?"
        )
    return (
        "I hope you're doing better since we last talked. I wanted to check in and see how you're managing. "
        "Remember, it's okay to reach out for support when you need it."
    )


# --- Optional OpenAI analysis (used if OPENAI_API_KEY is set) ---
_client = None
if config.OPENAI_API_KEY and not config.CRISIS_PATTERNS_ONLY:
    try:
        from openai import OpenAI  # pip install openai>=1
        # the client retries connection errors, 429 and 5xx with backoff
        _client = OpenAI(max_retries=3)
    except Exception:
        logging.exception("OpenAI client init failed; crisis analysis will use pattern matching only")
        _client = None


CRISIS_SYSTEM_PROMPT = (
    "You are a crisis detection expert specializing in mental health risk assessment. "
    "Analyze the message and conversation context for suicidal ideation (direct or indirect), self-harm intentions, "
    "severe depression indicators, substance abuse as a coping mechanism, complete social isolation, and immediate "
    "danger to self or others.\n"
    "Respond ONLY with a JSON object: {\"riskLevel\": \"none|low|medium|high|critical\", \"indicators\": [...], "
    "\"confidenceScore\": 0.0-1.0, \"analysisReason\": \"...\", \"requiresCheckIn\": boolean}.\n"
    "Risk levels: none = no concerning indicators; low = mild stress or sadness with normal coping; "
    "medium = moderate distress, some concerning language; high = clear distress signals, potential self-harm risk; "
    "critical = immediate suicide risk, self-harm statements, crisis language."
)


def llm_available() -> bool:
    return _client is not None


def _llm_analysis(message: str, history: Sequence[str], user_context: Dict[str, Any]) -> Dict[str, Any]:
    recent = "\n".join(list(history)[-3:])
    resp = _client.chat.completions.create(
        model=config.CRISIS_MODEL,
        temperature=0.1,
        response_format={"type": "json_object"},
        messages=[
            {"role": "system", "content": CRISIS_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Current message: {message}\n\n"
                    f"Recent conversation context:\n{recent}\n\n"
                    f"User context: {json.dumps(user_context)}"
                ),
            },
        ],
    )
    return json.loads(resp.choices[0].message.content or "{}")


def _pattern_fallback(pattern: CrisisAnalysis) -> CrisisAnalysis:
    # without a model verdict, anything above low gets a follow-up
    return build_analysis(
        pattern.risk_level,
        pattern.indicators,
        pattern.confidence_score,
        pattern.analysis_reason,
        requires_check_in=pattern.risk_level not in (RiskLevel.none, RiskLevel.low),
    )


def analyze_crisis_risk(
    message: str,
    history: Sequence[str] = (),
    user_context: Optional[Dict[str, Any]] = None,
) -> CrisisAnalysis:
    """Assess crisis risk for a message.

    Critical pattern hits return immediately. Otherwise the OpenAI model is asked
    for a second opinion when configured. An unconfigured model and any upstream
    failure both fall back to the pattern result.
    """
    pattern = detect_immediate_risk(message)
    if pattern.risk_level == RiskLevel.critical:
        return pattern
    if _client is None:
        return _pattern_fallback(pattern)

    try:
        ai = _llm_analysis(message, history, user_context or {})
    except Exception as e:
        logging.exception("Crisis analysis via OpenAI failed: %s", e)
        return _pattern_fallback(pattern)
    if not isinstance(ai, dict):
        logging.warning("Crisis model returned non-object JSON; using pattern result")
        return _pattern_fallback(pattern)
    return combine_analyses(pattern, ai)
