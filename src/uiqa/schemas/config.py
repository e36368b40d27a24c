"""Configuration schema: validates uiqa-config.yml."""

from pydantic import BaseModel, Field, model_validator

from uiqa.schemas.orchestration import ProviderId, QualityPreferences


class ProviderSettings(BaseModel):
    """How to reach one provider through an OpenAI-compatible endpoint."""

    model: str
    base_url: str | None = None  # None = the SDK default (api.openai.com)
    api_key_env: str


def _default_providers() -> dict[ProviderId, ProviderSettings]:
    return {
        ProviderId.VERCEL: ProviderSettings(
            model="v0-1.0-md",
            base_url="https://api.v0.dev/v1",
            api_key_env="VERCEL_API_KEY",
        ),
        ProviderId.OPENAI: ProviderSettings(
            model="gpt-4o",
            api_key_env="OPENAI_API_KEY",
        ),
        ProviderId.ANTHROPIC: ProviderSettings(
            model="claude-3-5-sonnet-20241022",
            base_url="https://api.anthropic.com/v1/",
            api_key_env="ANTHROPIC_API_KEY",
        ),
    }


class QualityConfig(BaseModel):
    """Top-level configuration loaded from uiqa-config.yml.

    Every field has a default, so an empty mapping is a valid config.
    """

    providers: dict[ProviderId, ProviderSettings] = Field(default_factory=_default_providers)
    default_provider: ProviderId = ProviderId.VERCEL

    # Providers with this many observations or fewer are not ranked.
    min_provider_generations: int = Field(default=5, ge=0)

    # Overall score at or above which a generation counts as a success.
    success_threshold: int = Field(default=70, ge=0, le=100)

    # Error-severity TypeScript diagnostics tolerated before code quality drops.
    typescript_error_allowance: int = Field(default=1, ge=0)

    # Generation call
    generation_timeout: float = Field(default=120.0, gt=0)  # seconds
    max_tokens: int = Field(default=4000, gt=0)
    temperature: float = Field(default=0.7, ge=0, le=2)

    preferences: QualityPreferences = QualityPreferences()

    # Output
    output_directory: str = "./output"

    @model_validator(mode="after")
    def check_default_provider_configured(self) -> "QualityConfig":
        if self.default_provider not in self.providers:
            raise ValueError(
                f"default_provider '{self.default_provider.value}' has no entry in 'providers'"
            )
        return self
