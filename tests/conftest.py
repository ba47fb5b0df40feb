import os
import tempfile

# Configure before any trai module is imported: throwaway DB, no external providers.
os.environ["TRAI_DB"] = os.path.join(tempfile.mkdtemp(prefix="trai-test-"), "test.db")
os.environ["CRISIS_PATTERNS_ONLY"] = "1"
os.environ["ELEVENLABS_API_KEY"] = ""
