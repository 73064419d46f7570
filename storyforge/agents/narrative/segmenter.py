from typing import List

from storyforge.core.story_types import Scene, Story
from storyforge.core.logger import get_logger

logger = get_logger("segmenter")

IMAGE_PROMPT_WORDS = 20
TITLE_WORDS = 4


def split_scenes(story_text: str) -> List[str]:
    """Split generated text on blank lines, dropping empty paragraphs."""
    return [part.strip() for part in story_text.split("\n\n") if part.strip()]


def generate_image_prompt(scene_text: str, genre: str, tone: str) -> str:
    scene_words = " ".join(scene_text.split(" ")[:IMAGE_PROMPT_WORDS])
    return (
        f"{scene_words}, {genre.lower()} style, {tone.lower()} mood, "
        "cinematic lighting, highly detailed digital art"
    )


def generate_story_title(prompt: str, genre: str) -> str:
    """
    First four words of the prompt with their first letter upper-cased,
    followed by the genre.

    >>> generate_story_title("a lonely robot finds hope", "Sci-Fi")
    'A Lonely Robot Finds: A Sci-Fi Story'
    """
    words = prompt.split(" ")[:TITLE_WORDS]
    title = " ".join(word[:1].upper() + word[1:] for word in words)
    return f"{title}: A {genre} Story"


def build_story(
    prompt: str,
    genre: str,
    tone: str,
    audience: str,
    story_text: str,
    requested_scenes: int,
    generated_by: str = "Groq",
) -> Story:
    """
    Assemble a Story from raw generated text.

    The requested scene count is only a hint given to the text model; the
    story keeps however many paragraphs came back.
    """
    paragraphs = split_scenes(story_text)
    if len(paragraphs) != requested_scenes:
        logger.warning(f"Scene count mismatch: requested {requested_scenes}, got {len(paragraphs)}")

    scenes = tuple(
        Scene(id=index + 1, text=text, image_prompt=generate_image_prompt(text, genre, tone))
        for index, text in enumerate(paragraphs)
    )
    return Story(
        title=generate_story_title(prompt, genre),
        genre=genre,
        tone=tone,
        audience=audience,
        scenes=scenes,
        generated_by=generated_by,
    )
