"""Configuration loading and validation."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from affairs_digest.prompts import DIGEST_PROMPT


class ApiKeysConfig(BaseModel):
    """API keys configuration."""

    gemini: Optional[str] = None


class GeminiConfig(BaseModel):
    """Generative model request configuration."""

    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.0-flash"
    temperature: float = 0.2
    max_output_tokens: int = 4096
    timeout_seconds: float = 60.0
    max_attempts: int = 1


class EmailConfig(BaseModel):
    """Email message configuration."""

    sender: Optional[str] = None
    recipients: str = ""
    subject_prefix: str = "Current Affairs Digest"

    @field_validator("recipients", mode="before")
    @classmethod
    def join_recipient_list(cls, value):
        # YAML configs may list recipients instead of a comma-separated string
        if isinstance(value, (list, tuple)):
            return ",".join(str(v) for v in value)
        return value

    @property
    def recipient_list(self) -> list[str]:
        """Recipients in configured order, duplicates kept."""
        return [r.strip() for r in self.recipients.split(",") if r.strip()]


class SmtpConfig(BaseModel):
    """SMTP relay configuration."""

    host: str = "smtp.gmail.com"
    port: int = 587
    starttls: bool = True
    username: Optional[str] = None
    password: Optional[str] = None
    max_attempts: int = 1


class ServerConfig(BaseModel):
    """HTTP trigger configuration."""

    host: str = "0.0.0.0"
    port: int = 3000
    trigger_key: Optional[str] = None


class SchedulerConfig(BaseModel):
    """Scheduler configuration."""

    cron: str = "0 6 * * *"
    # None means the host's local timezone
    timezone: Optional[str] = None
    enabled: bool = True


class PromptsConfig(BaseModel):
    """LLM prompt configuration."""

    digest_prompt: str = DIGEST_PROMPT

    @classmethod
    def from_yaml(cls, path: Path | str) -> "PromptsConfig":
        """Load prompts from a YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AFFAIRS_DIGEST_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    api_keys: ApiKeysConfig = Field(default_factory=ApiKeysConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    smtp: SmtpConfig = Field(default_factory=SmtpConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    prompts: PromptsConfig = Field(default_factory=PromptsConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from a YAML file.

        Blank entries (empty strings, nulls, empty sections) are dropped so
        they never shadow values from the environment or .env.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls(**drop_blank(data))


def drop_blank(data: dict) -> dict:
    """Recursively remove empty-string and null values from YAML data."""
    cleaned = {}
    for key, value in data.items():
        if isinstance(value, dict):
            value = drop_blank(value)
            if not value:
                continue
        elif value is None or value == "":
            continue
        cleaned[key] = value
    return cleaned


CONFIG_SEARCH_PATHS = (
    Path("config.yaml"),
    Path("config.yml"),
    Path.home() / ".config" / "affairs-digest" / "config.yaml",
)

# Global config instance
_config: Optional[Config] = None


def find_config_file() -> Optional[Path]:
    """First existing config file, relative paths resolved against the cwd."""
    for candidate in CONFIG_SEARCH_PATHS:
        path = candidate if candidate.is_absolute() else Path.cwd() / candidate
        if path.exists():
            return path
    return None


def get_config() -> Config:
    """Get the global configuration, loading it on first use."""
    if _config is None:
        return load_config()
    return _config


def load_config(path: Optional[Path | str] = None) -> Config:
    """Load configuration and make it the global instance.

    Precedence, highest first: config file, environment, .env, defaults.
    A prompts.yaml beside the config file (or in the cwd) replaces the
    default prompt.
    """
    config_path = Path(path) if path else find_config_file()
    config = Config.from_yaml(config_path) if config_path else Config()

    prompts_dir = config_path.parent if config_path else Path.cwd()
    prompts_path = prompts_dir / "prompts.yaml"
    if prompts_path.exists():
        config.prompts = PromptsConfig.from_yaml(prompts_path)

    set_config(config)
    return config


def set_config(config: Optional[Config]) -> None:
    """Replace the global configuration. None forces a reload on next use."""
    global _config
    _config = config
