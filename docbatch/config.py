# docbatch/config.py
import logging
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "DocBatch"
    LOG_LEVEL: str = "INFO"

    # Gemini
    GEMINI_API_KEY: Optional[str] = None
    DETECTION_MODEL: str = "gemini-2.0-flash"
    DATA_MODEL: str = "gemini-2.0-flash"

    # Rendering (px per pt)
    PREVIEW_SCALE: float = 1.5
    OCR_SCALE: float = 2.0
    CANVAS_MAX_WIDTH: int = 900

    # OCR
    OCR_LANG: str = "eng"
    TESSERACT_CMD: Optional[str] = None

    # Local credential store
    CREDENTIALS_PATH: str = ".docbatch/credentials.json"

    # Placeholder defaults
    DEFAULT_FONT_SIZE: float = 12.0
    DEFAULT_COLOR: str = "#000000"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s', '%Y-%m-%d %H:%M:%S')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(settings.LOG_LEVEL.upper())
        logger.propagate = False
    return logger
