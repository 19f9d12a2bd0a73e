"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from docmatch.errors import ConfigurationError
from docmatch.matching.matcher import DEFAULT_THRESHOLD
from docmatch.similarity.metrics import DEFAULT_MAX_TEXT_CHARS
from docmatch.similarity.scorer import DEFAULT_WEIGHTS, ScoringWeights
from docmatch.utils.files import DEFAULT_EXTENSIONS

DEFAULT_BUCKET = "Repository"


@dataclass(slots=True)
class AppConfig:
    threshold: float = DEFAULT_THRESHOLD
    max_text_chars: int = DEFAULT_MAX_TEXT_CHARS
    weights: ScoringWeights = DEFAULT_WEIGHTS
    with_content: bool = True
    extract_workers: int = 4
    match_workers: int = 1
    extensions: Tuple[str, ...] = field(default=DEFAULT_EXTENSIONS)

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(f"Threshold must be between 0 and 1, got {self.threshold}")
        if self.max_text_chars < 1:
            raise ConfigurationError("max_text_chars must be positive")
        self.extract_workers = max(1, self.extract_workers)
        self.match_workers = max(1, self.match_workers)


@dataclass(slots=True)
class StorageConfig:
    """Connection settings for a remote storage bucket."""

    url: str
    key: str
    bucket: str = DEFAULT_BUCKET
    timeout: float = 30.0

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, *, bucket: Optional[str] = None
    ) -> "StorageConfig":
        """Read ``SUPABASE_URL`` and a service-role or anon key.

        The service-role key takes precedence over the anon key.
        """
        env = os.environ if environ is None else environ
        url = env.get("SUPABASE_URL")
        key = env.get("SUPABASE_SERVICE_ROLE_KEY") or env.get("SUPABASE_ANON_KEY")
        if not url or not key:
            raise ConfigurationError("Missing SUPABASE_URL or service/anon key in environment")
        return cls(
            url=url.rstrip("/"),
            key=key,
            bucket=bucket or env.get("DOCMATCH_BUCKET") or DEFAULT_BUCKET,
        )
