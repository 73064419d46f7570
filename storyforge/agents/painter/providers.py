"""
Image providers for the painter.

Each provider performs exactly one HTTP request per call and reports the
outcome as a Success/Failure value. Retries and ordering live in
retry.py and chain.py.
"""

import asyncio
import base64
import random
from html import escape
from typing import Optional, Union
from urllib.parse import quote

import httpx

from storyforge.core.config import is_configured, HUGGINGFACE_KEY_PLACEHOLDER
from storyforge.core.story_types import Success, Failure, ProviderOutcome

# Error bodies from generative APIs sometimes arrive with a 200 status
MIN_IMAGE_BYTES = 1000

PLACEHOLDER_COLORS = ["FF6B6B", "4ECDC4", "45B7D1", "96CEB4", "FFEAA7", "DDA0DD", "FFB6C1", "87CEEB"]


class ImageProvider:
    """Base class: one request to one image service."""

    name = "provider"
    timeout = 30.0
    always_succeeds = False

    def __init__(self, client: Optional[httpx.AsyncClient] = None, rng: Optional[random.Random] = None):
        self.client = client
        self.rng = rng or random.Random()

    def is_configured(self) -> bool:
        return True

    async def generate(self, prompt: str) -> ProviderOutcome:
        raise NotImplementedError

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self.client is not None:
            return await self.client.request(method, url, timeout=self.timeout, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, timeout=self.timeout, **kwargs)

    async def _fetch(self, method: str, url: str, **kwargs) -> Union[httpx.Response, Failure]:
        """
        Send one request and validate it.

        Returns the response when it has a 2xx status and a non-trivial body,
        otherwise a Failure describing why it was rejected. The timeout is a
        deadline for the whole exchange, body included; httpx alone only
        bounds each read.
        """
        try:
            resp = await asyncio.wait_for(self._send(method, url, **kwargs), self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            return Failure(f"{self.name} timed out after {self.timeout:g}s")
        except httpx.HTTPError as e:
            return Failure(f"{self.name} request error: {e}")

        if not resp.is_success:
            return Failure(f"{self.name} returned HTTP {resp.status_code}")
        if len(resp.content) < MIN_IMAGE_BYTES:
            return Failure(f"{self.name} returned an invalid image ({len(resp.content)} bytes)")
        return resp


class HuggingFaceProvider(ImageProvider):
    """Keyed Stable Diffusion inference; returns an inline base64 PNG."""

    name = "huggingface"
    timeout = 30.0

    def __init__(self, api_key: Optional[str], model_url: str, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.model_url = model_url

    def is_configured(self) -> bool:
        return is_configured(self.api_key, HUGGINGFACE_KEY_PLACEHOLDER)

    async def generate(self, prompt: str) -> ProviderOutcome:
        result = await self._fetch(
            "POST",
            self.model_url,
            json={"inputs": prompt},
            headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
        )
        if isinstance(result, Failure):
            return result
        encoded = base64.b64encode(result.content).decode("ascii")
        return Success(f"data:image/png;base64,{encoded}")


class PollinationsProvider(ImageProvider):
    """Free text-to-image URL service. The URL itself is the image reference."""

    name = "pollinations"
    timeout = 25.0

    def __init__(self, base_url: str = "https://image.pollinations.ai/prompt", **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")

    def build_url(self, prompt: str) -> str:
        seed = self.rng.randrange(1_000_000)
        clean_prompt = quote(prompt[:150], safe="")
        return f"{self.base_url}/{clean_prompt}?width=1024&height=1024&seed={seed}&enhance=true&nologo=true"

    async def generate(self, prompt: str) -> ProviderOutcome:
        image_url = self.build_url(prompt)
        result = await self._fetch("GET", image_url)
        if isinstance(result, Failure):
            return result
        return Success(image_url)


class PicsumProvider(ImageProvider):
    """Random stock photo keyed by seed. Unrelated to the prompt but highly available."""

    name = "picsum-placeholder"
    timeout = 20.0

    def __init__(self, base_url: str = "https://picsum.photos/seed", **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")

    async def generate(self, prompt: str) -> ProviderOutcome:
        seed = self.rng.randrange(1000)
        image_url = f"{self.base_url}/{seed}/1024/1024"
        result = await self._fetch("GET", image_url, follow_redirects=True)
        if isinstance(result, Failure):
            return result
        return Success(image_url)


class SyntheticPlaceholderProvider(ImageProvider):
    """Inline SVG placeholder. No network, never fails."""

    name = "enhanced-placeholder"
    always_succeeds = True

    def render(self, text: str) -> str:
        return synthetic_placeholder(text, self.rng.choice(PLACEHOLDER_COLORS))

    async def generate(self, prompt: str) -> ProviderOutcome:
        return Success(self.render(f"AI Art: {prompt[:30]}..."))


def synthetic_placeholder(text: str, color: str = PLACEHOLDER_COLORS[0]) -> str:
    """Build a 1024x1024 SVG data URI with centered text on a flat background."""
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="1024" height="1024" viewBox="0 0 1024 1024">'
        f'<rect width="1024" height="1024" fill="#{color}"/>'
        '<text x="512" y="512" fill="#ffffff" font-family="sans-serif" font-size="40" '
        f'text-anchor="middle" dominant-baseline="middle">{escape(text)}</text>'
        '</svg>'
    )
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")
