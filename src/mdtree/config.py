"""Application configuration: settings schema and config.yaml / environment loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationInfo, field_validator


CONFIG_FILE = "config.yaml"

# Environment variable names per field, highest priority first.
ENV_KEYS: dict[str, tuple[str, ...]] = {
    "prefix":       ("MDTREE_PREFIX", "REI_GLOBAL_PREFIX_NAME", "REI_PUBLIC_APP_PREFIX_NAME"),
    "source_dir":   ("MDTREE_SOURCE_DIR", "REI_CONTENT_SOURCE_DIR", "REI_PUBLIC_APP_CONTENT_SOURCE_DIR"),
    "output_dir":   ("MDTREE_OUTPUT_DIR", "REI_CONTENT_OUTPUT_DIR", "REI_PUBLIC_APP_CONTENT_OUTPUT_DIR"),
    "route_base":   ("MDTREE_ROUTE_BASE", "REI_CONTENT_ROUTE_BASE", "REI_PUBLIC_APP_CONTENT_ROUTE_BASE"),
    "clean_output": ("MDTREE_CLEAN_OUTPUT", "REI_CONTENT_CLEAN_OUTPUT", "REI_PUBLIC_APP_CONTENT_CLEAN_OUTPUT"),
    "public_dir":   ("MDTREE_PUBLIC_DIR",),
    "blog_dir":     ("MDTREE_BLOG_DIR",),
}

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def parse_bool(value: Any, default: bool) -> bool:
    """Accept bools and true/1/yes/on, false/0/no/off strings; anything else -> default."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, str)):
        raw = str(value).strip().lower()
        if raw in _TRUE:
            return True
        if raw in _FALSE:
            return False
    return default


class Settings(BaseModel):
    prefix:       str  = Field(default="rei",            description="Namespace token for the index file name")
    source_dir:   str  = Field(default="content",        description="Markdown/asset source, relative to project root")
    output_dir:   str  = Field(default="public/content", description="Mirrored output, must sit inside public_dir")
    route_base:   str  = Field(default="/content",       description="URL prefix under which output is served")
    clean_output: bool = Field(default=True,             description="Delete output_dir before each build")
    public_dir:   str  = Field(default="public",         description="Served root that confines output_dir")
    blog_dir:     str  = Field(default="blog",           description="Top-level source directory holding blog posts")

    @field_validator("prefix", "source_dir", "output_dir", "route_base", "public_dir", "blog_dir", mode="before")
    @classmethod
    def _blank_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v.strip() if isinstance(v, str) else v

    @field_validator("clean_output", mode="before")
    @classmethod
    def _lenient_bool(cls, v: Any) -> bool:
        return parse_bool(v, cls.model_fields["clean_output"].default)


def env_overrides(environ: dict[str, str] = None) -> dict[str, str]:
    """Pick the first non-blank variable per field from ENV_KEYS."""
    environ = os.environ if environ is None else environ
    data: dict[str, str] = {}
    for name, keys in ENV_KEYS.items():
        for key in keys:
            val = environ.get(key)
            if val and val.strip():
                data[name] = val
                break
    return data


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then environment variables, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    data.update(env_overrides())

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**{k: v for k, v in data.items() if k in Settings.model_fields})
