# trai/crisis_gate.py
"""Decide which crisis-alert blocks the client renders for a risk analysis.

Every analysis is judged on its own; nothing about earlier alerts is kept here
and dismissing an alert changes nothing for the next one.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from trai import config
from trai.crisis import CrisisAnalysis, RiskLevel


class AlertTier(str, Enum):
    suppressed = "suppressed"
    informational = "informational"
    elevated = "elevated"
    urgent = "urgent"


TIER_BY_RISK = {
    RiskLevel.none: AlertTier.suppressed,
    RiskLevel.low: AlertTier.suppressed,
    RiskLevel.medium: AlertTier.informational,
    RiskLevel.high: AlertTier.elevated,
    RiskLevel.critical: AlertTier.urgent,
}

TITLES = {
    AlertTier.informational: "Check-in Scheduled",
    AlertTier.elevated: "Support Recommended",
    AlertTier.urgent: "Immediate Support Needed",
}

COLORS = {
    AlertTier.informational: "#D97706",
    AlertTier.elevated: "#EA580C",
    AlertTier.urgent: "#DC2626",
}

CHECK_IN_NOTICE = (
    "We'll check in with you again to see how you're doing. Your wellbeing is important to us."
)

MAX_RECOMMENDED_ACTIONS = 3


class AlertAction(BaseModel):
    kind: str  # "dial" | "professional_help"
    label: str
    href: Optional[str] = None


class AlertDetails(BaseModel):
    risk_level: RiskLevel
    confidence_percent: int
    indicators: List[str] = Field(default_factory=list)


class CrisisAlertPresentation(BaseModel):
    tier: AlertTier = AlertTier.suppressed
    visible: bool = False
    title: str = ""
    color: str = ""
    support_message: str = ""
    check_in_notice: Optional[str] = None
    emergency_contacts: List[str] = Field(default_factory=list)
    recommended_actions: List[str] = Field(default_factory=list)
    actions: List[AlertAction] = Field(default_factory=list)
    details: Optional[AlertDetails] = None


def alert_tier(level: RiskLevel) -> AlertTier:
    return TIER_BY_RISK[level]


def present_crisis_alert(analysis: CrisisAnalysis | None) -> CrisisAlertPresentation:
    if analysis is None:
        return CrisisAlertPresentation()
    tier = alert_tier(analysis.risk_level)
    if tier == AlertTier.suppressed:
        # none and low must render identically
        return CrisisAlertPresentation()

    presentation = CrisisAlertPresentation(
        tier=tier,
        visible=True,
        title=TITLES[tier],
        color=COLORS[tier],
        support_message=analysis.support_message,
        check_in_notice=CHECK_IN_NOTICE if analysis.check_in_scheduled else None,
        details=AlertDetails(
            risk_level=analysis.risk_level,
            confidence_percent=round(analysis.confidence_score * 100),
            indicators=list(analysis.indicators),
        ),
    )

    if tier in (AlertTier.elevated, AlertTier.urgent):
        presentation.emergency_contacts = list(analysis.emergency_contacts)
        presentation.recommended_actions = list(analysis.immediate_actions[:MAX_RECOMMENDED_ACTIONS])
        actions = []
        if tier == AlertTier.urgent:
            actions.append(AlertAction(
                kind="dial",
                label=f"Call Crisis Lifeline ({config.CRISIS_HOTLINE})",
                href=f"tel:{config.CRISIS_HOTLINE}",
            ))
        actions.append(AlertAction(kind="professional_help", label="Get Professional Help"))
        presentation.actions = actions

    return presentation
