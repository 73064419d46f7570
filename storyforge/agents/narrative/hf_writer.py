from typing import Optional

import httpx

from storyforge.core.config import settings, is_configured, HUGGINGFACE_KEY_PLACEHOLDER
from storyforge.core.logger import get_logger

logger = get_logger("hf_writer")

FALLBACK_TEXT = "Story generation failed"


class HuggingFaceWriterError(Exception):
    pass


class HuggingFaceWriter:
    """Alternative single-shot story generator on the Hugging Face inference API."""

    generated_by = "Hugging Face"
    timeout = 60.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model_url = model_url or settings.HUGGINGFACE_TEXT_MODEL_URL
        self.client = client

    def is_configured(self) -> bool:
        return is_configured(self.api_key, HUGGINGFACE_KEY_PLACEHOLDER)

    async def generate(self, prompt: str, genre: str, tone: str, audience: str) -> str:
        system_prompt = f"Write a {genre} story with {tone} tone for {audience}:\n\n{prompt}"
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            if self.client is not None:
                resp = await self.client.post(
                    self.model_url, json={"inputs": system_prompt}, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    resp = await client.post(
                        self.model_url, json={"inputs": system_prompt}, headers=headers, timeout=self.timeout
                    )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Hugging Face story generation failed: {e}")
            raise HuggingFaceWriterError(str(e)) from e

        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0].get("generated_text") or FALLBACK_TEXT
        return FALLBACK_TEXT
