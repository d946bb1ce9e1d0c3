"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking
  them into the CLI.
- The derivation service, code generator and runtime bindings read the same
  settings, so a custom namespace or CLI marker applies everywhere.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.engine.names import CLI_ANNOTATIONS, NAMESPACE


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "simple-conf"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "simple-conf"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "simple-conf"
    return Path.home() / ".config" / "simple-conf"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    """Parse `KEY=value` lines; comments, blanks and `export ` prefixes are ignored."""

    parsed: dict[str, str] = {}
    for line in map(str.strip, text.splitlines()):
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if line.startswith("#") or not sep or not key:
            continue
        parsed[key] = value.strip().strip("\"'")
    return parsed


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# simple-conf user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class ConfSettings(BaseSettings):
    """Central settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars, .env files).
    - One settings contract for the CLI, the generator and the runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIMPLE_CONF_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first, then the user's global one.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    namespace: str = Field(
        default=NAMESPACE,
        min_length=1,
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Annotation namespace read by the engine.",
    )
    cli_annotations: list[str] = Field(
        default_factory=lambda: list(CLI_ANNOTATIONS),
        description="Annotation names that opt a type into CLI integration.",
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation of the default JSON format handler.",
    )
    encoding: str = Field(
        default="utf-8",
        min_length=1,
        description="Text encoding for configuration and generated files.",
    )
    generated_suffix: str = Field(
        default="_conf",
        description="Suffix appended to the source module name for generated bindings.",
    )
    log_level: str = Field(
        default="WARNING",
        pattern=r"^(?i:debug|info|warning|error|critical)$",
        description="Log level for the CLI.",
    )
