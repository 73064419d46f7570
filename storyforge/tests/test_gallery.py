"""
Gallery Store Tests
===================
Newest-first ordering, the entry cap, and explicit save/load.
"""
from datetime import datetime, timedelta, timezone

from storyforge.agents.narrative.segmenter import build_story
from storyforge.client.gallery import GalleryStore, JsonFileBackend, MemoryBackend, format_created


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _story(prompt="a lonely robot finds hope"):
    return build_story(prompt, "Sci-Fi", "Hopeful", "Kids", "One.\n\nTwo.\n\nThree.", 3)


class TestGalleryStore:
    """Test gallery ordering, cap and persistence."""

    def test_add_prepends(self):
        """Test new stories go to the front."""
        store = GalleryStore()
        store.add(_story("first story"), now=NOW)
        store.add(_story("second story"), now=NOW + timedelta(seconds=1))

        assert [e.title for e in store.entries] == [
            "Second Story: A Sci-Fi Story",
            "First Story: A Sci-Fi Story",
        ]
        assert store.entries[0].scenes == 3
        assert store.entries[0].generated_by == "Groq"

    def test_keeps_only_latest_twenty(self):
        """Test the gallery keeps only the 20 newest stories."""
        store = GalleryStore()
        for i in range(25):
            store.add(_story(f"story {i}"), now=NOW + timedelta(seconds=i))

        assert len(store.entries) == 20
        assert store.entries[0].title == "Story 24: A Sci-Fi Story"
        assert store.entries[-1].title == "Story 5: A Sci-Fi Story"

    def test_save_and_load_round_trip_through_backend(self, tmp_path):
        """Test saved entries load back from a JSON file."""
        backend = JsonFileBackend(tmp_path / "gallery" / "stories.json")
        store = GalleryStore(backend)
        store.add(_story(), now=NOW)
        store.save()

        reloaded = GalleryStore(backend).load()
        assert reloaded == store.entries

    def test_load_without_saved_data(self, tmp_path):
        """Test loading with nothing saved gives an empty gallery."""
        assert GalleryStore(JsonFileBackend(tmp_path / "missing.json")).load() == []

    def test_corrupt_storage_loads_empty(self):
        """Test unreadable JSON loads as an empty gallery."""
        backend = MemoryBackend()
        backend.write("{not json")
        store = GalleryStore(backend)
        assert store.load() == []

    def test_wrong_shape_loads_empty(self):
        """Test JSON of the wrong shape loads as an empty gallery."""
        backend = MemoryBackend()
        backend.write('[{"unexpected": 1}]')
        assert GalleryStore(backend).load() == []

    def test_clear(self):
        """Test clear empties the gallery."""
        store = GalleryStore()
        store.add(_story(), now=NOW)
        store.clear()
        assert store.entries == []


class TestFormatCreated:
    """Test gallery card date labels."""

    def test_relative_labels(self):
        """Test today, yesterday and older dates."""
        assert format_created((NOW - timedelta(hours=2)).isoformat(), now=NOW) == "today"
        assert format_created((NOW - timedelta(hours=30)).isoformat(), now=NOW) == "yesterday"
        assert format_created((NOW - timedelta(days=5)).isoformat(), now=NOW) == "2026-10-14"

    def test_timestamp_without_timezone_read_as_utc(self):
        """Older saved entries may carry a naive ISO timestamp."""
        assert format_created("2026-10-19T09:00:00", now=NOW) == "today"
        assert format_created("2026-10-10T09:00:00", now=NOW) == "2026-10-10"
