"""Configuration loading for tubedigest."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path("~/.config/tubedigest/config.toml").expanduser()


@dataclass
class GeneralConfig:
    """Transcript and summary defaults."""

    preferred_language: str = "en"
    debug_logging: bool = False
    max_transcript_chars: int = 0  # 0 or negative means unlimited
    mode: str = "url"
    detail_level: str = "moderate"


@dataclass
class AIConfig:
    """Model provider settings."""

    provider: str = "gemini"
    model: str = "auto"
    chunk_chars: int = 12_000
    gemini_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""


@dataclass
class EnrichmentConfig:
    """Background comments digest and fact-check settings."""

    fact_check_enabled: bool = True
    fact_check_delay_seconds: float = 3.0
    comments_enabled: bool = False
    comments_max: int = 50
    comment_char_cap: int = 220
    max_workers: int = 4
    youtube_api_key: str = ""


@dataclass
class EmailConfig:
    """Email delivery settings."""

    enabled: bool = False
    to: str = ""
    from_addr: str = "tubedigest <tubedigest@resend.dev>"


@dataclass
class TubedigestConfig:
    """Top-level configuration for tubedigest."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
    email: EmailConfig = field(default_factory=EmailConfig)


def _apply_section(target: object, data: dict[str, object]) -> None:
    """Apply a dict of values onto a dataclass instance."""
    for key, value in data.items():
        if hasattr(target, key):
            expected_type = type(getattr(target, key))
            if expected_type is bool and isinstance(value, str):
                setattr(target, key, value.lower() in ("true", "1", "yes"))
            elif expected_type is int and isinstance(value, str):
                setattr(target, key, int(value))
            elif expected_type is float and isinstance(value, (str, int)):
                setattr(target, key, float(value))
            else:
                setattr(target, key, value)


def _apply_env_overrides(config: TubedigestConfig) -> None:
    """Override config values from environment variables."""
    env_map: dict[str, tuple[object, str]] = {
        "TUBEDIGEST_LANGUAGE": (config.general, "preferred_language"),
        "TUBEDIGEST_DEBUG": (config.general, "debug_logging"),
        "TUBEDIGEST_MAX_TRANSCRIPT_CHARS": (config.general, "max_transcript_chars"),
        "TUBEDIGEST_MODE": (config.general, "mode"),
        "TUBEDIGEST_DETAIL_LEVEL": (config.general, "detail_level"),
        "TUBEDIGEST_PROVIDER": (config.ai, "provider"),
        "TUBEDIGEST_MODEL": (config.ai, "model"),
        "TUBEDIGEST_CHUNK_CHARS": (config.ai, "chunk_chars"),
        "GEMINI_API_KEY": (config.ai, "gemini_api_key"),
        "OPENAI_API_KEY": (config.ai, "openai_api_key"),
        "ANTHROPIC_API_KEY": (config.ai, "anthropic_api_key"),
        "TUBEDIGEST_FACT_CHECK": (config.enrichment, "fact_check_enabled"),
        "TUBEDIGEST_COMMENTS": (config.enrichment, "comments_enabled"),
        "TUBEDIGEST_COMMENTS_MAX": (config.enrichment, "comments_max"),
        "YOUTUBE_API_KEY": (config.enrichment, "youtube_api_key"),
        "TUBEDIGEST_EMAIL_TO": (config.email, "to"),
    }
    for env_var, (section, attr) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _apply_section(section, {attr: value})


def load_config(path: Path | None = None) -> TubedigestConfig:
    """Load configuration from TOML file with env var overrides.

    Config file path resolution:
    1. Explicit ``path`` argument
    2. ``TUBEDIGEST_CONFIG`` environment variable
    3. ``~/.config/tubedigest/config.toml``
    """
    import tomllib

    config = TubedigestConfig()

    config_path = path or Path(
        os.environ.get("TUBEDIGEST_CONFIG", str(_DEFAULT_CONFIG_PATH))
    )
    config_path = config_path.expanduser()

    if config_path.exists():
        logger.info("Loading config from %s", config_path)
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        section_map: dict[str, object] = {
            "general": config.general,
            "ai": config.ai,
            "enrichment": config.enrichment,
            "email": config.email,
        }
        for section_name, section_obj in section_map.items():
            if section_name in data and isinstance(data[section_name], dict):
                _apply_section(section_obj, data[section_name])
    else:
        logger.debug("No config file found at %s, using defaults", config_path)

    _apply_env_overrides(config)
    return config


def set_config_value(key: str, value: str) -> None:
    """Set a single config value in the TOML file.

    Args:
        key: Dotted key like ``ai.provider``.
        value: The value to set.
    """
    import tomllib

    config_path = Path(
        os.environ.get("TUBEDIGEST_CONFIG", str(_DEFAULT_CONFIG_PATH))
    ).expanduser()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, dict[str, object]] = {}
    if config_path.exists():
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
        for k, v in raw.items():
            if isinstance(v, dict):
                data[k] = dict(v)
            else:
                data.setdefault("general", {})[k] = v

    parts = key.split(".", 1)
    if len(parts) != 2:
        msg = f"Key must be in 'section.key' format, got: {key}"
        raise ValueError(msg)

    section, attr = parts
    data.setdefault(section, {})[attr] = value

    _write_toml(config_path, data)
    logger.info("Set %s = %s in %s", key, value, config_path)


def _write_toml(path: Path, data: dict[str, dict[str, object]]) -> None:
    """Write a simple nested dict as TOML."""
    lines: list[str] = []
    for section, values in data.items():
        lines.append(f"[{section}]")
        for k, v in values.items():
            if isinstance(v, bool):
                lines.append(f"{k} = {str(v).lower()}")
            elif isinstance(v, (int, float)):
                lines.append(f"{k} = {v}")
            else:
                lines.append(f'{k} = "{v}"')
        lines.append("")
    path.write_text("\n".join(lines))
