"""
Context Loader Utility for StoryForge Agents

This module loads the system prompt templates used by the text agents and
keeps user-provided text isolated from instructions.
"""

from pathlib import Path
from functools import lru_cache


# Base directory for agents
AGENTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=10)
def load_context(agent_name: str) -> str:
    """
    Load context file for a specific agent.

    Args:
        agent_name: Name of the agent (writer)

    Returns:
        Content of the context file as string

    Raises:
        FileNotFoundError: If context file doesn't exist
    """
    context_paths = {
        "writer": AGENTS_DIR / "narrative" / "context_writer.txt",
    }

    if agent_name not in context_paths:
        raise ValueError(f"Unknown agent: {agent_name}. Available: {list(context_paths.keys())}")

    context_path = context_paths[agent_name]

    if not context_path.exists():
        raise FileNotFoundError(f"Context file not found: {context_path}")

    return context_path.read_text(encoding="utf-8")


def wrap_user_input(user_input: str) -> str:
    """
    Wrap user input in XML tags for input isolation.
    This helps the model distinguish between instructions and user data.
    """
    # Escape any existing XML-like tags in user input to prevent injection
    sanitized = user_input.replace("<", "&lt;").replace(">", "&gt;")
    return f"<user_input>\n{sanitized}\n</user_input>"


# User-facing messages for text generation failures (no internal details)
ERROR_MESSAGES = {
    "INVALID_API_KEY": "Invalid Groq API key. Please check your key in the .env file.",
    "QUOTA_EXCEEDED": "Groq quota exceeded. Please check your usage limits.",
    "PERMISSION_DENIED": "Permission denied. Make sure your Groq API key has the correct permissions.",
    "GENERATION_ERROR": "Failed to generate story",
}

SOLUTION_HINT = "Check your Groq API key and quota at https://console.groq.com/"


def get_user_friendly_error(error_type: str) -> str:
    """Get user-friendly error message, defaulting to the generic one."""
    return ERROR_MESSAGES.get(error_type, ERROR_MESSAGES["GENERATION_ERROR"])
