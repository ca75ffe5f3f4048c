"""Runtime settings for the templater CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from templater import __version__
from templater.domain.template import DEFAULT_PREFIX


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    log_dir: Path
    template_dirs: tuple[Path, ...] = field(default_factory=tuple)
    template_prefix: str = DEFAULT_PREFIX
    cli_version: str = __version__

    @property
    def telemetry_file(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir() -> Path:
    override = os.environ.get("TEMPLATER_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".templater"


def _template_dirs_from_env() -> tuple[Path, ...]:
    raw = os.environ.get("TEMPLATER_TEMPLATE_PATH", "")
    return tuple(Path(part).expanduser() for part in raw.split(os.pathsep) if part.strip())


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    prefix = os.environ.get("TEMPLATER_TEMPLATE_PREFIX", "").strip() or DEFAULT_PREFIX
    return RuntimeSettings(
        home_dir=base,
        log_dir=base / "logs",
        template_dirs=_template_dirs_from_env(),
        template_prefix=prefix,
    )


SETTINGS = load_settings()
