"""Configuration management for the ClinicalTrials.gov RAG engine."""

from collections.abc import Iterable
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.domain import PipelineOptions


def _sanitize_value(value: str) -> str:
    """Remove BOM characters and whitespace from string settings.

    Values pasted into ``.env`` files or injected by container runtimes may
    carry a BOM that breaks HTTP headers and URLs.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ClinicalTrials.gov API
    ctgov_base_url: str = "https://clinicaltrials.gov/api/v2/studies"
    request_timeout: int = 30
    user_agent: str = "ctgov-rag/1.0"

    # RAG settings
    chunk_size: int = 1000
    chunk_overlap: int = 200
    top_k_results: int = 5
    summary_max_length: int = 1200
    keyword_boost: float = 2.0
    metadata_boost: float = 1.0
    extra_keywords: list[str] = []
    result_source_tag: str = "clinicaltrials.gov"

    # Provider defaults
    study_limit: int = 10

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Path | None = None

    @field_validator("ctgov_base_url", "user_agent", "result_source_tag", mode="after")
    @classmethod
    def sanitize_strings(cls, value: str) -> str:
        """Remove BOM and whitespace from string values."""
        return _sanitize_value(value)

    def pipeline_options(self, keywords: Iterable[str] = (), **overrides: object) -> PipelineOptions:
        """Build engine options from settings, applying non-None overrides.

        Args:
            keywords: Caller boost keywords, added after ``extra_keywords``.
            **overrides: Any ``PipelineOptions`` field. ``None`` values are
                ignored so callers can forward optional arguments directly.

        Returns:
            PipelineOptions populated from settings and overrides.
        """
        values: dict[str, object] = {
            "top_k": self.top_k_results,
            "chunk_size": self.chunk_size,
            "overlap": self.chunk_overlap,
            "keyword_boosts": (*self.extra_keywords, *keywords),
            "summary_max_length": self.summary_max_length,
            "keyword_boost": self.keyword_boost,
            "metadata_boost": self.metadata_boost,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return PipelineOptions(**values)  # type: ignore[arg-type]


# Global settings instance
settings = Settings()
