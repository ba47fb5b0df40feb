# trai/main.py
from __future__ import annotations

import json
import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from sqlmodel import Session, select
from starlette.responses import JSONResponse, Response

from trai.crisis import CrisisAnalysis, RiskLevel, analyze_crisis_risk, check_in_message, follow_up_delay, llm_available
from trai.crisis_gate import CrisisAlertPresentation, present_crisis_alert
from trai.db import get_session, init_db
from trai.emotional_context import EmotionalContext, detect_emotional_context
from trai.errors import ConfigurationError
from trai.models import SafetyCheckIn, SafetyEvent, as_utc, utcnow
from trai.pipeline import VoicePlan, plan_voice_response
from trai.services.tts_service import synthesize_speech, tts_configured
from trai.voice_selection import select_voice_for_mood
from trai.voice_synthesis import ResolvedSynthesisParameters, synthesize, validate_profiles
from trai.voices import CATALOG, VoiceIdentity

# Basic logging so startup clearly reports which providers are enabled (will not print keys)
logging.basicConfig(level=logging.INFO)

# Refuse to start with a catalog voice that cannot be synthesized
validate_profiles(CATALOG)

app = FastAPI(title="TrAI Voice & Crisis Service", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Ensure database tables exist at import time as well (useful for tests without lifespan)
init_db()


@app.exception_handler(ConfigurationError)
async def _configuration_error(request: Request, exc: ConfigurationError):
    logging.error("Voice configuration error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Voice configuration error"})


@app.on_event("startup")
def _startup():
    init_db()
    logging.info("Voice catalog: %d voices, default %s", len(CATALOG), CATALOG.get_default_voice().display_name)
    if tts_configured():
        logging.info("ElevenLabs key found: speech synthesis enabled.")
    else:
        logging.info("ElevenLabs key not found: /api/voice/speak will return 503.")
    if llm_available():
        logging.info("OpenAI client configured: crisis analysis combines model and patterns.")
    else:
        logging.info("OpenAI key not found or client init failed: crisis analysis uses pattern matching only.")


def _preview(text: str, n: int = 80) -> str:
    return (text[:n] + '...') if len(text) > n else text


# -------- Pydantic request models --------
class ContextIn(BaseModel):
    message: str = ""
    emotion: str | None = None


class SelectIn(BaseModel):
    mood: str | None = None
    preference: str | None = None


class ParametersIn(BaseModel):
    voice: str
    context: EmotionalContext = EmotionalContext.neutral
    intensity: float = Field(default=1.0, ge=0.0, le=1.0)


class PlanIn(BaseModel):
    message: str = ""
    emotion: str | None = None
    mood: str | None = None
    voice_preference: str | None = None
    intensity: float = Field(default=1.0, ge=0.0, le=1.0)
    reply: str | None = None
    crisis_analysis: CrisisAnalysis | None = None


class SpeakIn(ParametersIn):
    text: str


class CrisisIn(BaseModel):
    message: str
    history: List[str] = Field(default_factory=list)
    session_id: str | None = None


class CrisisOut(BaseModel):
    analysis: CrisisAnalysis
    alert: CrisisAlertPresentation


# -------- Status & catalog --------
@app.get("/api/status")
def status():
    """Report which providers are configured. Never returns keys."""
    return {
        "voices": len(CATALOG),
        "default_voice": CATALOG.get_default_voice().display_name,
        "tts_configured": tts_configured(),
        "llm_configured": llm_available(),
    }


@app.get("/api/voices", response_model=List[VoiceIdentity])
def list_voices(gender: str | None = None):
    if gender:
        return CATALOG.get_voices_by_gender(gender)
    return list(CATALOG.voices)


@app.get("/api/voices/default", response_model=VoiceIdentity)
def default_voice():
    return CATALOG.get_default_voice()


@app.get("/api/voices/{name}/id")
def voice_id(name: str):
    return {"name": name, "voice_id": CATALOG.get_voice_id(name)}


# -------- Voice pipeline --------
@app.post("/api/voice/context")
def voice_context(payload: ContextIn):
    return {"context": detect_emotional_context(payload.message, payload.emotion)}


@app.post("/api/voice/select", response_model=VoiceIdentity)
def voice_select(payload: SelectIn):
    return select_voice_for_mood(payload.mood, payload.preference)


def _resolve_parameters(payload: ParametersIn) -> ResolvedSynthesisParameters:
    voice = CATALOG.get_voice(payload.voice)
    if voice is None:
        raise HTTPException(status_code=404, detail=f"Unknown voice: {payload.voice}")
    return synthesize(voice.display_name, payload.context, payload.intensity)


@app.post("/api/voice/parameters", response_model=ResolvedSynthesisParameters)
def voice_parameters(payload: ParametersIn):
    return _resolve_parameters(payload)


@app.post("/api/voice/plan", response_model=VoicePlan)
def voice_plan(payload: PlanIn):
    logging.info("/api/voice/plan preview=%s", _preview(payload.message))
    return plan_voice_response(
        payload.message,
        prior_emotion=payload.emotion,
        mood=payload.mood,
        voice_preference=payload.voice_preference,
        intensity=payload.intensity,
        reply=payload.reply,
        crisis_analysis=payload.crisis_analysis,
    )


@app.post("/api/voice/speak")
def voice_speak(payload: SpeakIn):
    params = _resolve_parameters(payload)
    audio = synthesize_speech(payload.text, params)
    if audio is None:
        raise HTTPException(status_code=503, detail="Speech synthesis unavailable")
    return Response(content=audio, media_type="audio/mpeg")


# -------- Crisis analysis & alerts --------
@app.post("/api/crisis/analyze", response_model=CrisisOut)
def crisis_analyze(payload: CrisisIn, db: Session = Depends(get_session)):
    analysis = analyze_crisis_risk(payload.message, payload.history)
    sid = payload.session_id
    logging.info("/api/crisis/analyze session=%s risk=%s", sid, analysis.risk_level.value)

    if sid and analysis.risk_level in (RiskLevel.high, RiskLevel.critical):
        db.add(SafetyEvent(
            session_id=sid,
            kind="crisis_detected",
            risk_level=analysis.risk_level.value,
            payload=analysis.model_dump_json(),
        ))

    delay = follow_up_delay(analysis.risk_level)
    if sid and analysis.requires_check_in and delay is not None:
        now = utcnow()
        db.add(SafetyCheckIn(
            session_id=sid,
            risk_level=analysis.risk_level.value,
            trigger_message=payload.message[:500],
            created_at=now,
            follow_up_at=now + delay,
        ))
        analysis.check_in_scheduled = True
    db.commit()

    return CrisisOut(analysis=analysis, alert=present_crisis_alert(analysis))


@app.post("/api/crisis/alert", response_model=CrisisAlertPresentation)
def crisis_alert(analysis: CrisisAnalysis):
    return present_crisis_alert(analysis)


@app.get("/api/safety/{session_id}")
def list_safety_events(session_id: str, db: Session = Depends(get_session)):
    rows = db.exec(
        select(SafetyEvent).where(SafetyEvent.session_id == session_id).order_by(SafetyEvent.created_at)
    ).all()
    return [
        {"kind": r.kind, "risk_level": r.risk_level, "analysis": json.loads(r.payload), "created_at": r.created_at.isoformat()}
        for r in rows
    ]


# -------- Follow-up check-ins --------
def _checkin_out(c: SafetyCheckIn) -> dict:
    return {
        "id": c.id,
        "session_id": c.session_id,
        "risk_level": c.risk_level,
        "created_at": c.created_at.isoformat(),
        "follow_up_at": c.follow_up_at.isoformat() if c.follow_up_at else None,
        "response_received": c.response_received,
    }


def _get_checkin(checkin_id: int, db: Session) -> SafetyCheckIn:
    c = db.get(SafetyCheckIn, checkin_id)
    if not c:
        raise HTTPException(status_code=404, detail="Check-in not found")
    return c


@app.get("/api/checkins/{session_id}")
def list_checkins(session_id: str, db: Session = Depends(get_session)):
    rows = db.exec(
        select(SafetyCheckIn).where(SafetyCheckIn.session_id == session_id).order_by(SafetyCheckIn.created_at)
    ).all()
    return [_checkin_out(r) for r in rows]


@app.post("/api/checkins/{checkin_id}/respond")
def respond_checkin(checkin_id: int, db: Session = Depends(get_session)):
    c = _get_checkin(checkin_id, db)
    c.response_received = True
    db.add(c)
    db.commit()
    db.refresh(c)
    return _checkin_out(c)


@app.get("/api/checkins/{checkin_id}/message")
def checkin_message(checkin_id: int, db: Session = Depends(get_session)):
    c = _get_checkin(checkin_id, db)
    hours = int((utcnow() - as_utc(c.created_at)).total_seconds() // 3600)
    return {"id": c.id, "message": check_in_message(RiskLevel(c.risk_level), hours)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
