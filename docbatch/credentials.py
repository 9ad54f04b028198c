# docbatch/credentials.py
# Single Gemini API key kept on the local machine.
import json
from pathlib import Path

from docbatch.config import get_logger, settings

logger = get_logger(__name__)


def _path() -> Path:
    return Path(settings.CREDENTIALS_PATH)


def load_api_key() -> str:
    path = _path()
    if path.exists():
        try:
            stored = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable credentials file {path}: {e}")
            stored = None
        if isinstance(stored, dict):
            return str(stored.get("api_key") or "")
        if stored is not None:
            logger.warning(f"Ignoring credentials file {path}: expected a JSON object")
    return settings.GEMINI_API_KEY or ""


def save_api_key(api_key: str):
    path = _path()
    if not api_key:
        path.unlink(missing_ok=True)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"api_key": api_key}))
