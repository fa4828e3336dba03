"""Configuration settings for Autonoma."""

# Load .env into os.environ so provider SDKs that read their own env vars work
from dotenv import load_dotenv

load_dotenv()

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Global settings for Autonoma.

    Settings can be overridden via environment variables with AUTONOMA_ prefix.
    Example: AUTONOMA_CHARTER_MAX_TOKENS=8192
    """

    # Model config
    default_provider: str = Field(
        default="anthropic",
        description="Provider used when none is given (anthropic, openai, litellm)"
    )
    default_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Default model for all agent calls"
    )

    # Output budgets per call type
    intake_max_tokens: int = Field(
        default=2048,
        description="Maximum output tokens for an intake dialogue turn"
    )
    charter_max_tokens: int = Field(
        default=4096,
        description="Maximum output tokens for charter generation"
    )
    analysis_max_tokens: int = Field(
        default=512,
        description="Maximum output tokens for update analysis and escalation advice"
    )

    # Project defaults
    initial_health_score: int = Field(
        default=85,
        ge=0,
        le=100,
        description="Health score stored on a freshly created project"
    )

    # API settings (env: AUTONOMA_<KEY>, providers also fall back to the standard env var)
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key (env: AUTONOMA_ANTHROPIC_API_KEY)",
    )
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (env: AUTONOMA_OPENAI_API_KEY)",
    )

    log_level: str = Field(
        default="INFO",
        description="Log level for the CLI log handler"
    )

    model_config = {
        "env_prefix": "AUTONOMA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",  # ignore extra env vars (e.g. ANTHROPIC_API_KEY) not in schema
    }


# Create singleton instance
settings = Settings()
