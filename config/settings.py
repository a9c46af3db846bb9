import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment overrides from .env next to this file
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")


class Settings:
    BACKEND_URL: str = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")

    REPLICATE_API_URL: str = os.getenv("REPLICATE_API_URL", "https://api.replicate.com/v1")
    REPLICATE_API_TOKEN: str | None = os.getenv("REPLICATE_API_TOKEN")

    EDIT_MODEL: str = os.getenv("EDIT_MODEL", "google/nano-banana")
    GENERATE_MODEL: str = os.getenv("GENERATE_MODEL", "google/gemini-2.5-flash-image")
    OUTPUT_FORMAT: str = "jpg"

    POLL_INTERVAL: float = float(os.getenv("POLL_INTERVAL", "1.0"))  # seconds
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "300"))
    SUBMIT_TIMEOUT: float | None = float(os.getenv("SUBMIT_TIMEOUT", "300")) or None

    # Drop surface limits
    MAX_IMAGES: int = 5
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024
    ACCEPTED_MEDIA_TYPES: tuple[str, ...] = ("image/jpeg", "image/png", "image/webp")

    PROGRESS_STEP: int = 10
    PROGRESS_CAP: int = 90
    PROGRESS_TICK: float = 1.0
    PROGRESS_RESET_DELAY: float = 2.0

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
