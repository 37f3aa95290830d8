from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from enrolment.rules import STANDARD, VARIANTS
from shared.config_store import get_config_value

BASE_DIR = Path(__file__).resolve().parent.parent

TOOL_NAME = "enrolment"


class Settings(BaseSettings):
    enrolment_api_base_url: str = "http://localhost:5000/api"
    enrolment_api_timeout: float = 30.0
    enrolment_api_token: str = ""
    validation_variant: str = STANDARD

    # Audit trail lives under data_dir / "audit"
    data_dir: Path = BASE_DIR / "data"

    model_config = {"env_file": BASE_DIR / ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_validation_variant() -> str:
    """Tool config wins over the environment; unknown values fall back to standard."""
    variant = get_config_value(TOOL_NAME, "validation_variant", get_settings().validation_variant)
    return variant if variant in VARIANTS else STANDARD
