"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class DatabaseConfig(BaseModel):
    """Postgres configuration."""

    url: Optional[str] = Field(None, description="Database connection string")
    url_env: Optional[str] = Field("DB_URL", description="Environment variable for the connection string")
    min_size: int = Field(1, description="Minimum pooled connections", ge=0)
    max_size: int = Field(10, description="Maximum pooled connections", ge=1)


class OllamaConfig(BaseModel):
    """Inference endpoint used for content normalization."""

    host: Optional[str] = Field(None, description="Ollama base URL")
    host_env: Optional[str] = Field("OLLAMA_HOST", description="Environment variable for the base URL")
    model: Optional[str] = Field(None, description="Model used to convert HTML to markdown")
    model_env: Optional[str] = Field("OLLAMA_HTML_READER", description="Environment variable for the model")
    num_ctx: int = Field(8192, description="Context window size", ge=1)
    num_ctx_env: Optional[str] = Field(
        "OLLAMA_HTML_READER_NUM_CTX", description="Environment variable for the context window size"
    )
    timeout: Optional[float] = Field(None, description="Request timeout in seconds (none by default)")


class HttpConfig(BaseModel):
    """Feed and scrape request settings."""

    timeout: Optional[float] = Field(None, description="Request timeout in seconds (none by default)")
    user_agent: str = Field(
        "newsfound/0.1 (RSS reader)", description="User agent sent with feed requests"
    )


class EnrichmentConfig(BaseModel):
    """Enrichment batch settings."""

    batch_size: int = Field(5, description="Pending articles processed per source per run", ge=1, le=500)


class WorkerConfig(BaseModel):
    """Worker loop settings."""

    interval_minutes: int = Field(60, description="Sleep between runs", ge=1)


class ConfigModel(BaseModel):
    """Main configuration model."""

    environment: str = Field("development", description="Deployment environment tag")
    environment_env: Optional[str] = Field("DEPLOYMENT_ENV", description="Environment variable for the tag")
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)
    worker: WorkerConfig = Field(default_factory=WorkerConfig)


class FeedConfig(BaseModel):
    """Feed entry from feeds.yaml."""

    url: str = Field(..., description="Feed URL")
    enabled: bool = Field(True, description="Whether the feed is ingested")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) feed URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Feed URL must be http(s): {v}")
        return v


DEFAULT_FEEDS: List[FeedConfig] = [
    FeedConfig(url="https://tnc.news/feed/"),
    FeedConfig(url="https://www.cbc.ca/cmlink/rss-topstories"),
]
