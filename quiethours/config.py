from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_HERO_DIR = Path(__file__).resolve().parent.parent / "public" / "hero"


class Settings(BaseSettings):
    data_dir: Path = DEFAULT_DATA_DIR
    hero_dir: Path = DEFAULT_HERO_DIR
    log_level: str = "INFO"
    log_json: bool = True
    force_csv_export: bool = Field(default=False, alias="FORCE_CSV_EXPORT")
    site_name: str = "Quiet Hours & Noise Rules"

    @field_validator("data_dir", mode="before")
    @classmethod
    def default_empty_data_dir(cls, v):
        if v is None or not str(v).strip():
            return DEFAULT_DATA_DIR
        return v

    model_config = {"env_prefix": "", "case_sensitive": False, "populate_by_name": True}


settings = Settings()
