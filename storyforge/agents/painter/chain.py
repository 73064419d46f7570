"""
Fallback chain for image acquisition.

Entries are tried strictly in order until one succeeds. The last entry must
be a provider that cannot fail, so the chain always produces an image
reference. Entries whose provider is not configured (missing or placeholder
API key) are skipped and do not count as attempts.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from storyforge.agents.painter.providers import ImageProvider
from storyforge.agents.painter.retry import RetryingProvider
from storyforge.core.story_types import ChainResult, Success
from storyforge.core.logger import get_logger

logger = get_logger("painter.chain")


@dataclass(frozen=True)
class ChainEntry:
    provider: ImageProvider
    attempts: int = 1
    delay: float = 0.0
    message: Optional[str] = None


class FallbackChain:

    def __init__(self, entries: Sequence[ChainEntry], sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        if not entries:
            raise ValueError("FallbackChain needs at least one entry")
        if not entries[-1].provider.always_succeeds:
            raise ValueError(
                f"Last chain entry must always succeed, got '{entries[-1].provider.name}'"
            )
        self.entries = list(entries)
        self.sleep = sleep

    def _runner(self, entry: ChainEntry) -> ImageProvider:
        if entry.attempts > 1:
            return RetryingProvider(entry.provider, attempts=entry.attempts, delay=entry.delay, sleep=self.sleep)
        return entry.provider

    @property
    def source_names(self) -> List[str]:
        return [entry.provider.name for entry in self.entries]

    async def run(self, prompt: str) -> ChainResult:
        attempted = []
        for entry in self.entries:
            provider = entry.provider
            if not provider.is_configured():
                logger.debug(f"Skipping {provider.name}: not configured")
                continue

            attempted.append(provider.name)
            outcome = await self._runner(entry).generate(prompt)
            if isinstance(outcome, Success):
                logger.info(f"Image resolved by {provider.name} after {len(attempted)} provider(s)")
                return ChainResult(
                    image_url=outcome.payload,
                    source=provider.name,
                    message=entry.message,
                    attempts=tuple(attempted),
                )
            logger.warning(f"{provider.name} failed: {outcome.reason}")

        # Unreachable while the terminal entry always succeeds
        raise RuntimeError("Fallback chain exhausted without a terminal placeholder")
