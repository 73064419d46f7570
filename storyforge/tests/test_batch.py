"""
Batch Coordinator Tests
=======================
Staggered per-scene image generation with isolated failures.
"""
import asyncio

from storyforge.core.story_types import ChainResult, Scene
from storyforge.agents.painter.batch import BatchCoordinator
from storyforge.tests.fakes import RecordingSleep, make_painter, no_sleep


def _scenes(n):
    return [Scene(id=i, text=f"scene {i}", image_prompt=f"prompt {i}") for i in range(1, n + 1)]


def test_failing_scene_does_not_affect_siblings():
    """An exception in one scene becomes a placeholder while the others finish."""
    async def generate(image_prompt, style):
        if image_prompt == "prompt 2":
            raise RuntimeError("chain exploded")
        return ChainResult(image_url=f"https://img/{image_prompt}", source="pollinations", message="")

    results = asyncio.run(BatchCoordinator(generate, sleep=RecordingSleep()).run(_scenes(3)))

    assert len(results) == 3
    assert [r.scene_id for r in results] == [1, 2, 3]
    assert results[0].source == "pollinations"
    assert results[0].image_url == "https://img/prompt 1"
    assert results[2].image_url == "https://img/prompt 3"
    assert results[1].source == "fallback-placeholder"
    assert results[1].error == "chain exploded"
    assert results[1].image_url.startswith("data:image/svg+xml;base64,")


def test_stagger_grows_with_scene_index():
    """Scene i waits i times the stagger before starting."""
    sleep = RecordingSleep()

    async def generate(image_prompt, style):
        return ChainResult(image_url="https://img", source="pollinations")

    asyncio.run(BatchCoordinator(generate, stagger=3.0, sleep=sleep).run(_scenes(4)))

    assert sorted(sleep.calls) == [3.0, 6.0, 9.0]


def test_results_follow_scene_order_not_completion_order():
    """Results keep input order whatever order the scenes finish in."""
    async def generate(image_prompt, style):
        # Earlier scenes finish last
        index = int(image_prompt.split()[-1])
        await asyncio.sleep(0.01 * (5 - index))
        return ChainResult(image_url=f"https://img/{index}", source="pollinations")

    results = asyncio.run(BatchCoordinator(generate, sleep=no_sleep).run(_scenes(4)))

    assert [r.scene_id for r in results] == [1, 2, 3, 4]
    assert [r.image_url for r in results] == [f"https://img/{i}" for i in range(1, 5)]


def test_style_passed_to_every_scene():
    """The batch style reaches every per-scene request."""
    styles = []

    async def generate(image_prompt, style):
        styles.append(style)
        return ChainResult(image_url="https://img", source="pollinations")

    asyncio.run(BatchCoordinator(generate, sleep=RecordingSleep()).run(_scenes(2)))
    assert styles == ["cinematic digital art", "cinematic digital art"]


def test_offline_batch_yields_one_image_per_scene():
    """With every provider down each scene still gets an image."""
    painter = make_painter()
    scenes = _scenes(5)
    results = asyncio.run(painter.generate_story_images(scenes))

    assert len(results) == len(scenes)
    assert all(r.image_url for r in results)
    assert {r.source for r in results} == {"enhanced-placeholder"}


def test_blank_scene_prompt_gets_annotated_placeholder():
    """Test a scene with no prompt gets a placeholder carrying the error."""
    painter = make_painter()
    scenes = [Scene(id=1, text="", image_prompt="a harbor"), Scene(id=2, text="", image_prompt="")]
    results = asyncio.run(painter.generate_story_images(scenes))

    assert results[0].source == "enhanced-placeholder"
    assert results[1].source == "fallback-placeholder"
    assert results[1].error == "Image prompt is required"


def test_empty_batch():
    """Test no scenes gives no images."""
    painter = make_painter()
    assert asyncio.run(painter.generate_story_images([])) == []
