import os
from typing import Optional
from dotenv import load_dotenv

# Load variables from .env file
load_dotenv()

# Values shipped in .env.example; treated the same as a missing key
GROQ_KEY_PLACEHOLDER = "your_groq_api_key_here"
HUGGINGFACE_KEY_PLACEHOLDER = "your_huggingface_key_here"


def is_configured(value: Optional[str], placeholder: Optional[str] = None) -> bool:
    """True when a credential is present and not the example placeholder."""
    if not value or not value.strip():
        return False
    return value != placeholder


class Settings:
    PROJECT_NAME: str = "StoryForge AI"
    VERSION: str = "1.0.0"
    PORT: int = int(os.getenv("PORT", "3001"))
    CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Text generation
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY")
    GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    HUGGINGFACE_TEXT_MODEL_URL: str = os.getenv(
        "HUGGINGFACE_TEXT_MODEL_URL",
        "https://api-inference.huggingface.co/models/microsoft/DialoGPT-large",
    )
    DEFAULT_SCENE_COUNT: int = int(os.getenv("DEFAULT_SCENE_COUNT", "4"))

    # Image generation
    HUGGINGFACE_API_KEY: str = os.getenv("HUGGINGFACE_API_KEY")
    HUGGINGFACE_MODEL_URL: str = os.getenv(
        "HUGGINGFACE_MODEL_URL",
        "https://api-inference.huggingface.co/models/CompVis/stable-diffusion-v1-4",
    )
    POLLINATIONS_BASE_URL: str = os.getenv("POLLINATIONS_BASE_URL", "https://image.pollinations.ai/prompt")
    PICSUM_BASE_URL: str = os.getenv("PICSUM_BASE_URL", "https://picsum.photos/seed")
    POLLINATIONS_RETRIES: int = int(os.getenv("POLLINATIONS_RETRIES", "3"))
    POLLINATIONS_RETRY_DELAY: float = float(os.getenv("POLLINATIONS_RETRY_DELAY", "2.0"))
    BATCH_STAGGER_SECONDS: float = float(os.getenv("BATCH_STAGGER_SECONDS", "3.0"))

    @property
    def has_groq(self) -> bool:
        return is_configured(self.GROQ_API_KEY, GROQ_KEY_PLACEHOLDER)

    @property
    def has_huggingface(self) -> bool:
        return is_configured(self.HUGGINGFACE_API_KEY, HUGGINGFACE_KEY_PLACEHOLDER)


settings = Settings()
