from pydantic import BaseModel, Field, ConfigDict
from typing import Any, List, Optional

from storyforge.core.config import settings
from storyforge.core.story_types import Story, ImageResult


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --- Requests ---

class StoryRequest(BaseModel):
    prompt: Optional[str] = None
    genre: str = "Fantasy"
    tone: str = "Epic"
    audience: str = "Adults"
    scenes: int = Field(default_factory=lambda: settings.DEFAULT_SCENE_COUNT, ge=1)

    model_config = ConfigDict(frozen=True)


class HuggingFaceStoryRequest(BaseModel):
    prompt: Optional[str] = None
    genre: str = "Fantasy"
    tone: str = "Epic"
    audience: str = "Adults"


class ImageRequest(CamelModel):
    image_prompt: Optional[str] = Field(None, alias="imagePrompt")
    style: str = "digital art"


class SceneImagePrompt(CamelModel):
    id: int
    image_prompt: Optional[str] = Field(None, alias="imagePrompt")


class StoryImagesRequest(BaseModel):
    # Validated per item in the route so a non-array gets the scenes error
    scenes: Optional[Any] = None


# --- Responses ---

class SceneOut(CamelModel):
    id: int
    text: str
    image_prompt: str = Field(..., alias="imagePrompt")


class StoryResponse(CamelModel):
    title: str
    genre: str
    tone: str
    audience: str
    scenes: List[SceneOut]
    total_scenes: int = Field(..., alias="totalScenes")
    generated_by: str = Field(..., alias="generatedBy")

    @classmethod
    def from_story(cls, story: Story) -> "StoryResponse":
        return cls(
            title=story.title,
            genre=story.genre,
            tone=story.tone,
            audience=story.audience,
            scenes=[SceneOut(id=s.id, text=s.text, image_prompt=s.image_prompt) for s in story.scenes],
            total_scenes=story.total_scenes,
            generated_by=story.generated_by,
        )


class ImageResponse(CamelModel):
    image_url: str = Field(..., alias="imageUrl")
    source: str
    message: Optional[str] = None


class SceneImageOut(CamelModel):
    scene_id: int = Field(..., alias="sceneId")
    image_url: str = Field(..., alias="imageUrl")
    source: str
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: ImageResult) -> "SceneImageOut":
        return cls(
            scene_id=result.scene_id,
            image_url=result.image_url,
            source=result.source,
            message=result.message,
            error=result.error,
        )


class StoryImagesResponse(BaseModel):
    images: List[SceneImageOut]


class HuggingFaceStoryResponse(CamelModel):
    story: str
    generated_by: str = Field("Hugging Face", alias="generatedBy")
