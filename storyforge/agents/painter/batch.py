import asyncio
from typing import Awaitable, Callable, List, Sequence

from storyforge.agents.painter.providers import synthetic_placeholder, PLACEHOLDER_COLORS
from storyforge.core.story_types import ChainResult, ImageResult, Scene
from storyforge.core.logger import get_logger, log_agent_action

logger = get_logger("painter.batch")

GenerateFn = Callable[[str, str], Awaitable[ChainResult]]


class BatchCoordinator:
    """
    Runs the image chain for every scene of a story.

    Scene i starts after i * stagger seconds so free-tier providers are not
    hit all at once; the requests then overlap. A scene that raises gets a
    placeholder annotated with the error, siblings are unaffected. Results
    come back in scene order, not completion order.
    """

    def __init__(
        self,
        generate: GenerateFn,
        stagger: float = 3.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.generate = generate
        self.stagger = stagger
        self.sleep = sleep

    async def _run_scene(self, index: int, scene: Scene, style: str) -> ImageResult:
        try:
            if index:
                await self.sleep(index * self.stagger)
            result = await self.generate(scene.image_prompt, style)
            return ImageResult(
                scene_id=scene.id,
                image_url=result.image_url,
                source=result.source,
                message=result.message,
            )
        except Exception as e:
            logger.error(f"Scene {scene.id} image failed: {e}")
            color = PLACEHOLDER_COLORS[scene.id % len(PLACEHOLDER_COLORS)]
            return ImageResult(
                scene_id=scene.id,
                image_url=synthetic_placeholder(f"Scene {scene.id}", color),
                source="fallback-placeholder",
                error=str(e),
            )

    async def run(self, scenes: Sequence[Scene], style: str = "cinematic digital art") -> List[ImageResult]:
        tasks = [self._run_scene(i, scene, style) for i, scene in enumerate(scenes)]
        results = await asyncio.gather(*tasks)
        fallbacks = sum(1 for r in results if r.error)
        log_agent_action("batch", "story images", f"{len(results)} scenes, {fallbacks} forced placeholders")
        return list(results)
