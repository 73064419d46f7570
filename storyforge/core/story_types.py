from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Scene:
    id: int
    text: str
    image_prompt: str


@dataclass(frozen=True)
class Story:
    title: str
    genre: str
    tone: str
    audience: str
    scenes: Tuple[Scene, ...]
    generated_by: str = "Groq"

    @property
    def total_scenes(self) -> int:
        return len(self.scenes)


@dataclass(frozen=True)
class ImageResult:
    scene_id: int
    image_url: str
    source: str
    message: Optional[str] = None
    error: Optional[str] = None


# Provider attempt outcomes. Expected provider failures are values, not exceptions.

@dataclass(frozen=True)
class Success:
    payload: str


@dataclass(frozen=True)
class Failure:
    reason: str


ProviderOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class ChainResult:
    image_url: str
    source: str
    message: Optional[str] = None
    attempts: Tuple[str, ...] = field(default_factory=tuple)
