"""
Gallery of past generations for a client session.

The store is an explicit object handed to whatever renders it. Persistence
goes through a backend with save/load instead of ambient global storage.

The API server is stateless and never imports this module. It is the
client-side half: a frontend or script calling /generate-story keeps its
recent stories here and renders the cards with format_created.
"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from storyforge.core.story_types import Story
from storyforge.core.logger import get_logger

logger = get_logger("gallery")

GALLERY_LIMIT = 20


@dataclass(frozen=True)
class GalleryEntry:
    id: int
    title: str
    genre: str
    tone: str
    audience: str
    created_at: str
    scenes: int
    generated_by: str = "StoryForge"


class MemoryBackend:
    def __init__(self):
        self.raw: Optional[str] = None

    def read(self) -> Optional[str]:
        return self.raw

    def write(self, raw: str) -> None:
        self.raw = raw


class JsonFileBackend:
    def __init__(self, path):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, raw: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(raw, encoding="utf-8")


class GalleryStore:
    """Newest-first list of generated stories, capped at `limit` entries."""

    def __init__(self, backend=None, limit: int = GALLERY_LIMIT):
        self.backend = backend or MemoryBackend()
        self.limit = limit
        self.entries: List[GalleryEntry] = []

    def add(self, story: Story, now: Optional[datetime] = None) -> GalleryEntry:
        now = now or datetime.now(timezone.utc)
        entry = GalleryEntry(
            id=int(now.timestamp() * 1000),
            title=story.title,
            genre=story.genre,
            tone=story.tone,
            audience=story.audience,
            created_at=now.isoformat(),
            scenes=story.total_scenes,
            generated_by=story.generated_by or "StoryForge",
        )
        self.entries = [entry] + self.entries[: self.limit - 1]
        return entry

    def save(self) -> None:
        self.backend.write(json.dumps([asdict(e) for e in self.entries]))

    def load(self) -> List[GalleryEntry]:
        raw = self.backend.read()
        if not raw:
            self.entries = []
            return self.entries
        try:
            self.entries = [GalleryEntry(**item) for item in json.loads(raw)][: self.limit]
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to load stories from storage: {e}")
            self.entries = []
        return self.entries

    def clear(self) -> None:
        self.entries = []


def format_created(created_at: str, now: Optional[datetime] = None) -> str:
    """'today', 'yesterday' or the ISO date, as shown on gallery cards."""
    created = datetime.fromisoformat(created_at)
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    hours = (now - created).total_seconds() / 3600
    if hours < 24:
        return "today"
    if hours < 48:
        return "yesterday"
    return created.date().isoformat()
