"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDPOST_"


class Settings(BaseModel):
    app_name:       str = "mdpost"
    db_url:         str = "sqlite:///mdpost.db"
    parser_config:  str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    static_dir:     Optional[str] = Field(default=None, description="Root for site-absolute links (/images/...); unset skips them")
    max_versions:   int = Field(default=10, ge=0, description="Max stored versions per post; 0 disables pruning")
    output_dir:     str = Field(default="dist", description="Directory for normalized posts + index.json")
    include_drafts: bool = Field(default=False, description="Export and list drafts alongside published posts")
    duplicate_threshold: float = Field(default=0.8, ge=0.0, le=1.0, description="Similarity ratio for near-duplicate posts")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDPOST_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
