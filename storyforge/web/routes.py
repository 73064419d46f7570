from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from storyforge.core.config import settings
from storyforge.core.logger import log_agent_action
from storyforge.core.story_types import Scene
from storyforge.agents.context_loader import SOLUTION_HINT
from storyforge.agents.narrative.writer import StoryWriter, StoryGenerationError
from storyforge.agents.narrative.hf_writer import HuggingFaceWriter, HuggingFaceWriterError
from storyforge.agents.narrative.segmenter import build_story
from storyforge.agents.painter.painter import Painter, create_painter
from storyforge.schemas.schema import (
    StoryRequest,
    StoryResponse,
    HuggingFaceStoryRequest,
    HuggingFaceStoryResponse,
    ImageRequest,
    ImageResponse,
    StoryImagesRequest,
    SceneImagePrompt,
    StoryImagesResponse,
    SceneImageOut,
)

router = APIRouter()


# --- Dependencies (overridden in tests) ---

def get_writer() -> StoryWriter:
    return StoryWriter(api_key=settings.GROQ_API_KEY)


def get_hf_writer(request: Request) -> HuggingFaceWriter:
    return HuggingFaceWriter(
        api_key=settings.HUGGINGFACE_API_KEY,
        client=getattr(request.app.state, "http_client", None),
    )


def get_painter(request: Request) -> Painter:
    return create_painter(client=getattr(request.app.state, "http_client", None))


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


@router.get("/health")
async def health():
    return {
        "status": "Backend is running with Groq",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "apis": {
            "groq": "configured" if settings.has_groq else "missing key",
            "huggingFace": "configured" if settings.has_huggingface else "missing key (optional)",
            "pollinations": "always free (no key needed)",
            "imageGeneration": "multiple free APIs available",
        },
    }


@router.post("/generate-story", response_model=StoryResponse)
async def generate_story(body: StoryRequest, writer: StoryWriter = Depends(get_writer)):
    if not body.prompt or not body.prompt.strip():
        return _bad_request("Story prompt is required")

    if not writer.is_configured():
        return JSONResponse(status_code=500, content={
            "error": "Groq API key not configured",
            "instructions": "Please add your Groq API key to the .env file",
        })

    try:
        story_text = await writer.generate_story_text(
            body.prompt, body.genre, body.tone, body.audience, body.scenes
        )
    except StoryGenerationError as e:
        return JSONResponse(status_code=500, content={
            "error": e.message,
            "details": e.details,
            "solution": SOLUTION_HINT,
        })

    story = build_story(
        body.prompt, body.genre, body.tone, body.audience, story_text,
        requested_scenes=body.scenes, generated_by=writer.generated_by,
    )
    log_agent_action("writer", "story", f"'{story.title}' | {story.total_scenes} scenes")
    return StoryResponse.from_story(story)


@router.post("/generate-story-huggingface", response_model=HuggingFaceStoryResponse)
async def generate_story_huggingface(body: HuggingFaceStoryRequest, writer: HuggingFaceWriter = Depends(get_hf_writer)):
    if not body.prompt or not body.prompt.strip():
        return _bad_request("Story prompt is required")

    if not writer.is_configured():
        return JSONResponse(status_code=500, content={
            "error": "Hugging Face API key not configured",
            "instructions": "Please add your Hugging Face API key to the .env file",
        })

    try:
        story = await writer.generate(body.prompt, body.genre, body.tone, body.audience)
    except HuggingFaceWriterError as e:
        return JSONResponse(status_code=500, content={
            "error": "Failed to generate story with Hugging Face",
            "details": str(e),
        })
    return HuggingFaceStoryResponse(story=story)


@router.post("/generate-image", response_model=ImageResponse)
async def generate_image(body: ImageRequest, painter: Painter = Depends(get_painter)):
    if not body.image_prompt or not body.image_prompt.strip():
        return _bad_request("Image prompt is required")

    result = await painter.generate_image(body.image_prompt, body.style)
    return ImageResponse(image_url=result.image_url, source=result.source, message=result.message)


@router.post("/generate-story-images", response_model=StoryImagesResponse)
async def generate_story_images(body: StoryImagesRequest, painter: Painter = Depends(get_painter)):
    if not isinstance(body.scenes, list):
        return _bad_request("Scenes array is required")

    try:
        items = [SceneImagePrompt.model_validate(s) for s in body.scenes]
    except ValidationError:
        return _bad_request("Each scene needs an id")

    scenes = [Scene(id=s.id, text="", image_prompt=s.image_prompt or "") for s in items]
    results = await painter.generate_story_images(scenes)
    return StoryImagesResponse(images=[SceneImageOut.from_result(r) for r in results])
