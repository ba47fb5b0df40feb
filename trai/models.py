from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive values even for columns written as UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SafetyEvent(SQLModel, table=True):
    __table_args__ = {"extend_existing": True}
    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)
    kind: str
    risk_level: str = Field(index=True)
    # JSON dump of the CrisisAnalysis that triggered the event
    payload: str
    created_at: datetime = Field(default_factory=utcnow)

class SafetyCheckIn(SQLModel, table=True):
    __table_args__ = {"extend_existing": True}
    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)
    risk_level: str
    trigger_message: str
    created_at: datetime = Field(default_factory=utcnow)
    follow_up_at: Optional[datetime] = Field(default=None, index=True)
    response_received: bool = Field(default=False)
