"""Configuration models used by the LaTeX renderer and the asset pipeline.

RenderConfig

`indent_width` (`int`)
: Number of spaces written per indentation level inside list environments.

`max_newlines` (`int | None`)
: Global cap on consecutive newlines written by the formatter. `None` keeps
  the budget unlimited so only explicit caps apply.

`full_document` (`bool`)
: Wrap the body in the preamble template and close it with
  `\\end{document}`. Disable to obtain a bare LaTeX fragment.

`figures_dir` (`str`)
: Directory, relative to the generated source, that receives the renamed
  images. Every `\\includegraphics` path points inside it.

`image_width` (`str`)
: Width option forwarded to `\\includegraphics`.

`legacy_latex_accents` (`bool`)
: When `True`, escape accented characters with legacy LaTeX macros instead of
  keeping Unicode glyphs.

`title` / `author` (`str | None`)
: Metadata written to the preamble. The document title wins over the
  configured one when both are present.

AssetConfig

`timeout` (`float`)
: Seconds allowed for a single remote image download.

`user_agent` (`str | None`)
: User-Agent header sent with remote downloads.

`raster_scale` (`float`)
: Scale factor applied when rasterizing SVG images to PNG.

`tex_name` (`str`)
: Stem of the LaTeX entry written into the archive.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigError


class RenderConfig(BaseModel):
    """Options controlling the textual LaTeX output."""

    model_config = ConfigDict(extra="forbid")

    indent_width: int = Field(default=2, ge=0)
    max_newlines: int | None = Field(default=None, ge=0)
    full_document: bool = True
    figures_dir: str = "figures"
    image_width: str = r"\textwidth"
    legacy_latex_accents: bool = False
    title: str | None = None
    author: str | None = None

    @field_validator("figures_dir")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        cleaned = value.strip().strip("/")
        if not cleaned:
            raise ValueError("figures_dir must not be empty")
        return cleaned


class AssetConfig(BaseModel):
    """Options controlling image retrieval and conversion."""

    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(default=10.0, gt=0)
    user_agent: str | None = None
    raster_scale: float = Field(default=1.0, gt=0)
    tex_name: str = "main"


class PaperConfig(BaseModel):
    """Top-level configuration combining rendering and asset settings."""

    model_config = ConfigDict(extra="forbid")

    render: RenderConfig = Field(default_factory=RenderConfig)
    assets: AssetConfig = Field(default_factory=AssetConfig)


def load_config(path: Path | str) -> PaperConfig:
    """Load a YAML configuration file into a validated model."""
    source = Path(path)
    try:
        payload = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{source}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration file '{source}': {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration file '{source}' must contain a mapping.")

    try:
        return PaperConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in '{source}': {exc}") from exc


__all__ = ["AssetConfig", "PaperConfig", "RenderConfig", "load_config"]
