"""
Application settings.

Values come from (highest priority first) environment variables prefixed
``BIOBLITZ_TREE_``, a local ``.env`` file, then the defaults below::

    BIOBLITZ_TREE_PROJECT_ID=city-nature-challenge-2024-london
    BIOBLITZ_TREE_OUTPUT_DIR=output
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the report."""

    model_config = SettingsConfigDict(
        env_prefix="BIOBLITZ_TREE_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "bioblitz-tree"
    app_env: str = "development"
    debug: bool = False

    # iNaturalist project (slug or numeric id) whose observations feed the tree
    project_id: str = "city-nature-challenge-2024-london"

    # Open Tree TNRS
    taxon_context: str = "Animals"
    min_match_score: float = Field(default=0.9, ge=0.0, le=1.0)

    # Artifacts
    output_dir: Path = Path("output")
    tree_filename: str = "tree.tre"
    svg_filename: str = "tree.svg"
    pdf_filename: str = "tree.pdf"

    # `serve` command
    api_port: int = 8000

    @property
    def tree_path(self) -> Path:
        return self.output_dir / self.tree_filename

    @property
    def svg_path(self) -> Path:
        return self.output_dir / self.svg_filename

    @property
    def pdf_path(self) -> Path:
        return self.output_dir / self.pdf_filename


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (read once)."""
    return Settings()
