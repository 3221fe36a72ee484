"""
Themed table name generation using Gemini
"""

import json
import logging
from typing import List, Optional

from google import genai
from google.genai import types

from seatsmart.core.config import settings
from seatsmart.core.exceptions import NameGenerationError

logger = logging.getLogger(__name__)

NAME_PROMPT = (
    'Generate a list of {count} creative and distinct table names based on the theme: "{theme}". '
    "Return ONLY the list of names as a JSON array of strings. Do not include numbering."
)

class TableNameService:
    """Service for generating table names from a theme"""

    def __init__(self, client=None, model: Optional[str] = None):
        self.model = model or settings.GEMINI_MODEL
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not settings.GEMINI_API_KEY:
                raise NameGenerationError(
                    "API Key is missing. Set GEMINI_API_KEY to use AI table names."
                )
            self._client = genai.Client(api_key=settings.GEMINI_API_KEY)
        return self._client

    def generate(self, theme: str, count: int) -> List[str]:
        """Return at most ``count`` distinct names for ``theme``"""
        if count < 1:
            return []

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=NAME_PROMPT.format(count=count, theme=theme),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=list[str],
                ),
            )
        except NameGenerationError:
            raise
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise NameGenerationError("Failed to generate names. Please try again.") from e

        text = getattr(response, "text", None)
        if not text:
            return []

        try:
            names = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Gemini returned non-JSON table names: {text!r}")
            raise NameGenerationError("Failed to generate names. Please try again.") from e

        if not isinstance(names, list):
            return []

        unique = []
        for name in names:
            if isinstance(name, str) and name.strip() and name.strip() not in unique:
                unique.append(name.strip())
        return unique[:count]
