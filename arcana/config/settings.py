from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class RitualConfig(BaseSettings):
    """Timing and randomness knobs for the reading ritual."""

    shuffle_seconds: float = Field(default=5.0, ge=0.0)
    reversal_probability: float = Field(default=0.5, ge=0.0, le=1.0)
    reading_timeout_seconds: float = Field(
        default=45.0,
        gt=0.0,
        description="Upper bound on the interpretation call before the fallback text is used.",
    )
    speech_timeout_seconds: float = Field(default=30.0, gt=0.0)
    ask_prompt_delay_seconds: float = Field(default=1.5, ge=0.0)
    reveal_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Animation hint returned to clients after the last pick.",
    )

    model_config = SettingsConfigDict(
        env_prefix="RITUAL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class AudioConfig(BaseSettings):
    """Ambient and narration channel configuration."""

    assets_dir: Path = _PROJECT_ROOT / "assets" / "audio"
    ambient_track: str = "background"
    sample_rate: int = 24000
    ambient_target_volume: float = Field(default=0.06, ge=0.0, le=1.0)
    ambient_fade_in_seconds: float = Field(default=5.0, ge=0.0)
    ambient_fade_out_seconds: float = Field(default=2.0, ge=0.0)
    ambient_floor_volume: float = Field(default=0.001, ge=0.0, le=1.0)
    voice_gain: float = Field(default=1.0, ge=0.0)

    model_config = SettingsConfigDict(
        env_prefix="AUDIO_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PollyConfig(BaseSettings):
    """Amazon Polly configuration."""

    region: str = "us-east-1"
    default_voice_id: str = "Zhiyu"
    language_code: str = "cmn-CN"
    engine: str = "neural"
    sample_rate: int = 16000
    access_key: str | None = None
    secret_key: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="POLLY_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="amazon.nova-pro-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=600,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=4096,
    )
    temperature: float = Field(
        default=1.0,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="BEDROCK_API_KEY",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Arcana Ritual Engine"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    generation_log_file: str = "logs/generation_pipeline.log"

    # Ritual
    ritual: RitualConfig = Field(default_factory=RitualConfig)

    # Audio
    audio: AudioConfig = Field(default_factory=AudioConfig)

    # Polly
    polly: PollyConfig = Field(default_factory=PollyConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
