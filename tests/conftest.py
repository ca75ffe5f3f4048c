from __future__ import annotations

import io
import os
import sys
import tarfile
from pathlib import Path
from typing import Callable, Iterable, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "templater-home"
os.environ["TEMPLATER_HOME"] = str(SANDBOX_HOME)
os.environ.pop("TEMPLATER_TEMPLATE_PATH", None)
os.environ.pop("TEMPLATER_TEMPLATE_PREFIX", None)
SANDBOX_HOME.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from templater.domain.naming import NamingParameters, resolve_naming  # noqa: E402
from templater.settings import RuntimeSettings  # noqa: E402

ArchiveEntries = Iterable[Tuple[str, "bytes | str | None"]]


def write_archive(path: Path, entries: ArchiveEntries) -> Path:
    """Write a tar.gz; ``None`` payloads become directory entries."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for name, payload in entries:
            info = tarfile.TarInfo(name)
            if payload is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
                continue
            data = payload.encode("utf-8") if isinstance(payload, str) else payload
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return path


@pytest.fixture()
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    def _make(entries: ArchiveEntries, name: str = "robovm-sample-template.tar.gz", directory: Path | None = None) -> Path:
        return write_archive((directory or tmp_path / "archives") / name, entries)

    return _make


@pytest.fixture()
def runtime_settings(tmp_path: Path) -> RuntimeSettings:
    home = tmp_path / "home"
    log_dir = home / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return RuntimeSettings(home_dir=home, log_dir=log_dir)


@pytest.fixture()
def acme_params() -> NamingParameters:
    return resolve_naming("com.acme.App", separator="/")
