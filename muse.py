"""Cosmic Muse: a one-line art prompt from Gemini.

``generate_cosmic_prompt`` never raises; every failure maps to a fixed
string.  ``MuseRequester`` runs it off the main thread and refuses to start a
second request while one is pending.
"""

import logging
import os
import threading
from typing import Callable

from google import genai

logger = logging.getLogger(__name__)

MODEL = "gemini-2.5-flash"
PROMPT = (
    "Generate a short, abstract, poetic, and cosmic art prompt for a generative "
    "painting app. It should be 10-15 words max. Example: 'The sound of a nebula "
    "weeping stardust.'"
)
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

SILENT_STARS = "The stars are silent right now."
MISSING_KEY = "The stars are silent right now. (Check API Key)"
EMPTY_RESPONSE = "The void whispers back."


def get_api_key() -> str | None:
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def generate_cosmic_prompt(api_key: str | None = None) -> str:
    api_key = api_key or get_api_key()
    if not api_key:
        logger.warning("Cosmic Muse: no API key in %s", " / ".join(API_KEY_ENV_VARS))
        return MISSING_KEY
    try:
        client = genai.Client(api_key=api_key)
        response = client.models.generate_content(model=MODEL, contents=PROMPT)
        text = (response.text or "").strip()
    except Exception:
        logger.warning("Cosmic Muse error", exc_info=True)
        return SILENT_STARS
    return text or EMPTY_RESPONSE


class MuseRequester:
    """Run prompt requests on a daemon thread, one at a time."""

    def __init__(self, on_result: Callable[[str], None],
                 generate: Callable[[], str] = generate_cosmic_prompt):
        self.on_result = on_result
        self.generate = generate
        self._lock = threading.Lock()
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def request(self) -> bool:
        """Start a request; returns False if one is already in flight."""
        with self._lock:
            if self._pending:
                return False
            self._pending = True
        threading.Thread(target=self._run, daemon=True).start()
        return True

    def _run(self):
        try:
            text = self.generate()
        except Exception:
            logger.exception("Cosmic Muse request failed")
            text = SILENT_STARS
        try:
            self.on_result(text)
        finally:
            with self._lock:
                self._pending = False
