"""
Generative AI client configuration.

The GenAI SDK client is built on demand and handed to the services that need
it, so tests and request handlers can supply their own instance.
"""
import logging
from typing import Optional

from google import genai

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def create_genai_client(settings: Optional[Settings] = None) -> genai.Client:
    """Create a GenAI SDK client from settings. Fails fast on a missing key."""
    settings = settings or default_settings
    if not settings.GEMINI_API_KEY:
        raise ConfigurationError("GEMINI_API_KEY is not configured")
    try:
        return genai.Client(api_key=settings.GEMINI_API_KEY)
    except Exception as e:
        logger.error(f"Failed to initialize GenAI client: {e}")
        raise ConfigurationError(f"Failed to initialize GenAI client: {e}") from e
