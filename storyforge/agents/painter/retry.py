import asyncio
from typing import Awaitable, Callable

from storyforge.agents.painter.providers import ImageProvider
from storyforge.core.story_types import Success, Failure, ProviderOutcome
from storyforge.core.logger import log_provider_attempt


class RetryingProvider(ImageProvider):
    """
    Wraps a provider with a fixed attempt budget and a fixed delay.

    The delay is only slept between attempts, never after the last one.
    No exponential backoff: the free providers usually fail because of a
    short queue, not sustained overload.
    """

    def __init__(
        self,
        provider: ImageProvider,
        attempts: int = 3,
        delay: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")
        super().__init__(client=provider.client, rng=provider.rng)
        self.provider = provider
        self.attempts = attempts
        self.delay = delay
        self.sleep = sleep
        self.name = provider.name
        self.always_succeeds = provider.always_succeeds

    def is_configured(self) -> bool:
        return self.provider.is_configured()

    async def generate(self, prompt: str) -> ProviderOutcome:
        last_reason = "no attempt made"
        for attempt in range(1, self.attempts + 1):
            outcome = await self.provider.generate(prompt)
            if isinstance(outcome, Success):
                log_provider_attempt(self.name, attempt, True, f"{attempt}/{self.attempts}")
                return outcome

            last_reason = outcome.reason
            log_provider_attempt(self.name, attempt, False, f"{attempt}/{self.attempts} | {last_reason}")
            if attempt < self.attempts:
                await self.sleep(self.delay)

        return Failure(f"All {self.name} attempts failed: {last_reason}")
