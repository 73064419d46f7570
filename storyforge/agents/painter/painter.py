import asyncio
import random
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from storyforge.core.config import settings, Settings
from storyforge.core.story_types import ChainResult, ImageResult, Scene
from storyforge.core.logger import log_agent_action
from storyforge.agents.painter.providers import (
    HuggingFaceProvider,
    PollinationsProvider,
    PicsumProvider,
    SyntheticPlaceholderProvider,
)
from storyforge.agents.painter.chain import ChainEntry, FallbackChain
from storyforge.agents.painter.batch import BatchCoordinator


def build_default_chain(
    config: Settings = settings,
    client: Optional[httpx.AsyncClient] = None,
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> FallbackChain:
    """
    Keyed Hugging Face first (best quality, only when a key is set), then
    Pollinations with retry, then Picsum, then the synthetic placeholder.
    """
    rng = rng or random.Random()
    return FallbackChain(
        [
            ChainEntry(
                HuggingFaceProvider(config.HUGGINGFACE_API_KEY, config.HUGGINGFACE_MODEL_URL, client=client, rng=rng),
                message=None,
            ),
            ChainEntry(
                PollinationsProvider(config.POLLINATIONS_BASE_URL, client=client, rng=rng),
                attempts=config.POLLINATIONS_RETRIES,
                delay=config.POLLINATIONS_RETRY_DELAY,
                message="",
            ),
            ChainEntry(
                PicsumProvider(config.PICSUM_BASE_URL, client=client, rng=rng),
                message="Using placeholder image service",
            ),
            ChainEntry(
                SyntheticPlaceholderProvider(rng=rng),
                message="All image APIs temporarily unavailable. Using styled placeholder.",
            ),
        ],
        sleep=sleep,
    )


def enhance_prompt(image_prompt: str, style: str = "digital art") -> str:
    return f"{image_prompt}, {style}, high quality, detailed"


class Painter:
    """Image generation entry point used by the web routes."""

    def __init__(
        self,
        chain: FallbackChain,
        stagger: float = settings.BATCH_STAGGER_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.chain = chain
        self.batch = BatchCoordinator(self.generate_image, stagger=stagger, sleep=sleep)

    async def generate_image(self, image_prompt: str, style: str = "digital art") -> ChainResult:
        if not image_prompt or not image_prompt.strip():
            raise ValueError("Image prompt is required")
        result = await self.chain.run(enhance_prompt(image_prompt, style))
        log_agent_action("painter", "image", f"source={result.source} tried={','.join(result.attempts)}")
        return result

    async def generate_story_images(
        self, scenes: Sequence[Scene], style: str = "cinematic digital art"
    ) -> List[ImageResult]:
        return await self.batch.run(scenes, style=style)


def create_painter(
    client: Optional[httpx.AsyncClient] = None,
    config: Settings = settings,
    seed: Optional[int] = None,
) -> Painter:
    chain = build_default_chain(config, client=client, rng=random.Random(seed))
    return Painter(chain, stagger=config.BATCH_STAGGER_SECONDS)
