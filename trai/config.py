# trai/config.py
import os

# Load environment variables from a local .env file if present (non-fatal if missing)
try:
    from dotenv import load_dotenv  # type: ignore
    load_dotenv()
except Exception:
    pass


def _flag(name: str, default: str = "0") -> bool:
    return str(os.getenv(name, default)).lower() in ("1", "true", "yes", "on")


ELEVENLABS_API_KEY = os.getenv("ELEVENLABS_API_KEY")
ELEVENLABS_BASE_URL = os.getenv("ELEVENLABS_BASE_URL", "https://api.elevenlabs.io/v1")
ELEVENLABS_MODEL_ID = os.getenv("ELEVENLABS_MODEL_ID", "eleven_multilingual_v2")
TTS_TIMEOUT_SECONDS = float(os.getenv("TTS_TIMEOUT_SECONDS", "12"))

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
CRISIS_MODEL = os.getenv("CRISIS_MODEL", "gpt-4o")
# Disable the LLM crisis pass even when a key is present (pattern matching only)
CRISIS_PATTERNS_ONLY = _flag("CRISIS_PATTERNS_ONLY")

DB_PATH = os.getenv("TRAI_DB", "trai.db")

CRISIS_HOTLINE = os.getenv("CRISIS_HOTLINE", "988")
