from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from dotenv import load_dotenv


# Get the path to the .env file
CONFIG_DIR = Path(__file__).resolve().parent
# .env lives in the project root (two levels up from app/core)
PROJECT_ROOT = CONFIG_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / '.env'

# Load environment variables from .env file
load_dotenv(ENV_FILE_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding='utf-8',
        extra='ignore'
    )

    DEBUG_MODE: bool = False

    # Generative AI
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    QUESTION_COUNT: int = 5  # Questions requested per job description

    # Object storage (S3)
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    S3_BUCKET: str = ""

    # Recorded answers land at <folder>/audio/Q<index>.webm
    AUDIO_KEY_TEMPLATE: str = "{folder}/audio/Q{index}.webm"
    AUDIO_CONTENT_TYPE: str = "audio/webm"

    # File Upload Limits
    MAX_FILE_SIZE_MB: int = 10  # Maximum resume file size in MB

    # Logging
    LOG_JSON: bool = False


settings = Settings()
