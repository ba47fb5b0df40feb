import logging
import re
from typing import Any, Dict, Optional

import httpx

from trai import config
from trai.voice_synthesis import ResolvedSynthesisParameters

# markdown and symbols that read badly aloud
_SCRUB_RULES = [
    (r"\*\*(.+?)\*\*", r"\1"),
    (r"\*(.+?)\*", r"\1"),
    (r"(?<!\w)_{2,}(.+?)_{2,}(?!\w)", r"\1"),
    (r"(?<!\w)_(.+?)_(?!\w)", r"\1"),
    (r"~~(.+?)~~", r"\1"),
    (r"#{1,6}\s+", ""),
    (r"\[(.+?)\]\(.+?\)", r"\1"),
    (r"\*+", ""),
    (r"#{3,}", ""),
    (r"_{3,}", ""),
    (r"`+", ""),
    (r"\|", " "),
    (r"[~^\[\]{}]", ""),
    (r"\n{3,}", "\n\n"),
    (r"[ \t]{2,}", " "),
    (r"\.{3,}", "..."),
]


def scrub_text_for_tts(text: str) -> str:
    out = text or ""
    for pattern, repl in _SCRUB_RULES:
        out = re.sub(pattern, repl, out)
    return out.strip()


def tts_configured() -> bool:
    return bool(config.ELEVENLABS_API_KEY)


def build_tts_payload(text: str, params: ResolvedSynthesisParameters) -> Dict[str, Any]:
    return {
        "text": text,
        "model_id": config.ELEVENLABS_MODEL_ID,
        "voice_settings": {
            "stability": params.stability,
            "similarity_boost": params.similarity_boost,
            "style": params.style,
            "use_speaker_boost": params.speaker_boost,
        },
    }


def synthesize_speech(
    text: str,
    params: ResolvedSynthesisParameters,
    http: Optional[httpx.Client] = None,
) -> Optional[bytes]:
    """Render text with ElevenLabs. Returns audio bytes, or None when unavailable.

    Provider errors are logged, not retried; the caller decides whether to send
    the reply without audio.
    """
    if not config.ELEVENLABS_API_KEY:
        logging.warning("ELEVENLABS_API_KEY not configured; skipping speech for voice %s", params.voice_id)
        return None
    clean = scrub_text_for_tts(text)
    if not clean:
        return None

    url = f"{config.ELEVENLABS_BASE_URL.rstrip('/')}/text-to-speech/{params.voice_id}"
    headers = {
        "Accept": "audio/mpeg",
        "Content-Type": "application/json",
        "xi-api-key": config.ELEVENLABS_API_KEY,
    }
    owns_client = http is None
    client = http or httpx.Client(timeout=httpx.Timeout(config.TTS_TIMEOUT_SECONDS, connect=2.0))
    try:
        r = client.post(url, json=build_tts_payload(clean, params), headers=headers)
        if r.status_code != 200:
            logging.error("ElevenLabs returned %s for voice %s: %s", r.status_code, params.voice_id, r.text[:200])
            return None
        logging.info("Generated %d bytes of audio for voice %s", len(r.content), params.voice_id)
        return r.content
    except httpx.HTTPError:
        logging.exception("ElevenLabs request failed for voice %s", params.voice_id)
        return None
    finally:
        if owns_client:
            client.close()
