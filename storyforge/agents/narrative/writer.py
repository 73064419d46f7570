from typing import Optional

import groq
from groq import AsyncGroq

from storyforge.core.config import settings, is_configured, GROQ_KEY_PLACEHOLDER
from storyforge.core.logger import get_logger
from storyforge.agents.context_loader import load_context, wrap_user_input, get_user_friendly_error

logger = get_logger("writer")

# Markers Google-style and proxy APIs put in error messages
_MESSAGE_MARKERS = {
    "API_KEY_INVALID": "INVALID_API_KEY",
    "QUOTA_EXCEEDED": "QUOTA_EXCEEDED",
    "PERMISSION_DENIED": "PERMISSION_DENIED",
}


class StoryGenerationError(Exception):
    """Text generation failed; there is no fallback text generator."""

    def __init__(self, category: str, details: str = ""):
        self.category = category
        self.message = get_user_friendly_error(category)
        self.details = details
        super().__init__(self.message)


def classify_error(error: Exception) -> str:
    """Map an upstream exception to one of the user-facing error categories."""
    if isinstance(error, groq.AuthenticationError):
        return "INVALID_API_KEY"
    if isinstance(error, groq.RateLimitError):
        return "QUOTA_EXCEEDED"
    if isinstance(error, groq.PermissionDeniedError):
        return "PERMISSION_DENIED"

    message = str(error)
    for marker, category in _MESSAGE_MARKERS.items():
        if marker in message:
            return category
    return "GENERATION_ERROR"


def build_system_prompt(genre: str, tone: str, audience: str, scenes: int) -> str:
    return load_context("writer").format(genre=genre, tone=tone, audience=audience, scenes=scenes)


class StoryWriter:
    """Generates the raw narrative text for a story request."""

    generated_by = "Groq"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client: Optional[AsyncGroq] = None):
        self.model = model or settings.GROQ_MODEL
        self._api_key = api_key
        self._client = client

    def is_configured(self) -> bool:
        return self._client is not None or is_configured(self._api_key, GROQ_KEY_PLACEHOLDER)

    @property
    def client(self) -> AsyncGroq:
        # Created on first use so a missing key only fails the story routes
        if self._client is None:
            self._client = AsyncGroq(api_key=self._api_key)
        return self._client

    async def generate_story_text(self, prompt: str, genre: str, tone: str, audience: str, scenes: int) -> str:
        """
        Ask the model for `scenes` paragraphs separated by blank lines.

        Raises:
            StoryGenerationError: with a classified category on any upstream failure
        """
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_system_prompt(genre, tone, audience, scenes)},
                    {"role": "user", "content": wrap_user_input(prompt)},
                ],
                temperature=0.8,
                max_tokens=2048,
            )
            content = completion.choices[0].message.content
        except Exception as e:
            category = classify_error(e)
            logger.error(f"Story generation failed ({category}): {e}")
            raise StoryGenerationError(category, str(e)) from e

        if not content or not content.strip():
            raise StoryGenerationError("GENERATION_ERROR", "Model returned an empty story")
        return content
