"""Application settings using Pydantic BaseSettings for environment variable management."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Every component also takes its own values through its constructor;
    this object only supplies defaults for the CLI and the default wiring.

    Attributes:
        gemini_api_key: Google Gemini API key. None disables the LM signals.
        gemini_model: Gemini model used for rating and classification
        serper_api_key: Serper.dev key for web and scholar search. None disables search.
        max_rpm: Maximum outbound requests per minute per provider
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
        check_worthiness_threshold: Minimum detector score for a sentence to be a claim
        max_claims_per_article: Extraction stops after this many claims
        cache_ttl_seconds: TTL for classification and signal cache entries
        llm_scorer_timeout: Timeout for the AI-credibility and tone signals
        search_scorer_timeout: Timeout for the scholarly and web signals
        bias_snapshot_url: Optional URL or path of a JSON bias table snapshot
        bias_snapshot_path: Optional local file the last good snapshot is kept in
        web_max_results: Results requested from the web search provider
        scholar_max_results: Results requested from the scholar search provider
    """

    gemini_api_key: Optional[str] = Field(
        default=None,
        description="Google Gemini API key"
    )
    gemini_model: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model identifier"
    )
    serper_api_key: Optional[str] = Field(
        default=None,
        description="Serper.dev API key for web/scholar search"
    )
    max_rpm: int = Field(
        default=60,
        description="Maximum outbound requests per minute"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )
    check_worthiness_threshold: float = Field(
        default=2.5,
        description="Minimum check-worthiness score for a claim"
    )
    max_claims_per_article: int = Field(
        default=50,
        description="Maximum claims extracted per run"
    )
    cache_ttl_seconds: int = Field(
        default=86400,
        description="TTL for cached classifications and signal scores"
    )
    llm_scorer_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for language-model signals"
    )
    search_scorer_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for search-backed signals"
    )
    bias_snapshot_url: Optional[str] = Field(
        default=None,
        description="URL or file path of a JSON domain -> lean mapping"
    )
    bias_snapshot_path: Optional[str] = Field(
        default=None,
        description="Local file used to persist the last good bias snapshot"
    )
    web_max_results: int = Field(
        default=15,
        description="Maximum web search results per claim"
    )
    scholar_max_results: int = Field(
        default=20,
        description="Maximum scholar search results per claim"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance - used by the CLI and default wiring
settings = Settings()
