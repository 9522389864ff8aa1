"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field

# Default config directory
CONFIG_DIR = Path.home() / ".fileconverter"
CONFIG_FILE = CONFIG_DIR / "config.json"


class AppConfig(BaseModel):
    """Configuration for the FileConverter application."""

    output_dir: str = ""
    default_format: str = ""
    quality: int = Field(default=90, ge=1, le=100)
    last_source_dir: str = ""
    page_margin: float = Field(default=50.0, ge=0)
    text_font_size: float = Field(default=12.0, gt=0)
    table_font_size: float = Field(default=10.0, gt=0)
    log_retention_days: int = Field(default=7, ge=1)
    write_log_file: bool = True
