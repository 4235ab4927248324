"""Configuration utilities for infrastructure layer."""

import os
from pathlib import Path
from typing import Optional, Tuple, Union

from dotenv import load_dotenv

DEFAULT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_ANALYSIS_MODEL = "gpt-4o-mini-2024-07-18"
DEFAULT_CONNECTIVITY_HOST = "1.1.1.1"
DEFAULT_CONNECTIVITY_PORT = 53


def load_environment(env_file: Optional[Union[str, Path]] = None) -> bool:
    """
    Load variables from a .env file into the environment.

    Existing environment variables win over file values.

    Args:
        env_file: Explicit path; defaults to ``.env`` in the working directory

    Returns:
        True if a file was found and loaded
    """
    path = Path(env_file) if env_file else Path.cwd() / ".env"
    if not path.exists():
        return False
    return load_dotenv(path)


def get_openai_api_key() -> Optional[str]:
    """
    Get the completion API key.

    Returns:
        Key from OPENAI_API_KEY, or None if not set
    """
    key = os.getenv("OPENAI_API_KEY", "").strip()
    return key or None


def get_analysis_model() -> str:
    """Model name from CARVE_ANALYSIS_MODEL."""
    return os.getenv("CARVE_ANALYSIS_MODEL", DEFAULT_ANALYSIS_MODEL)


def get_completions_url() -> str:
    """Endpoint from CARVE_COMPLETIONS_URL."""
    return os.getenv("CARVE_COMPLETIONS_URL", DEFAULT_COMPLETIONS_URL)


def get_connectivity_target() -> Tuple[str, int]:
    """
    Host/port probed for reachability.

    Reads CARVE_CONNECTIVITY_HOST and CARVE_CONNECTIVITY_PORT; an
    unparseable port falls back to the default.
    """
    host = os.getenv("CARVE_CONNECTIVITY_HOST", DEFAULT_CONNECTIVITY_HOST)
    try:
        port = int(os.getenv("CARVE_CONNECTIVITY_PORT", str(DEFAULT_CONNECTIVITY_PORT)))
    except ValueError:
        port = DEFAULT_CONNECTIVITY_PORT
    return host, port
