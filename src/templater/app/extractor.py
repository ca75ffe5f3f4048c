"""Streaming extraction of template archives.

Entries are read in tar stream mode and materialised in archive order. Each
entry name goes through path substitution first; each written file whose
extension is allow-listed is then rewritten by the content pipeline before
the next entry is read.
"""

from __future__ import annotations

import gzip
import tarfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List

from templater.domain.errors import ArchiveCorruptError, ProjectIOError, TemplaterError
from templater.domain.naming import NamingParameters
from templater.domain.substitution import is_substitutable, substitute_content, substitute_path

CHUNK_SIZE = 64 * 1024

_CORRUPT_ERRORS = (tarfile.TarError, gzip.BadGzipFile, EOFError, zlib.error)


@dataclass(frozen=True)
class ExtractionEntry:
    raw_name: str
    relative_path: str
    kind: str  # "directory" | "file"
    target: Path
    substituted: bool = False

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.raw_name,
            "path": self.relative_path,
            "kind": self.kind,
            "substituted": self.substituted,
        }


def substitute_file(path: Path, params: NamingParameters) -> bool:
    """Rewrite ``path`` in place when its extension is allow-listed.

    The whole file is decoded as UTF-8, transformed and written back; line
    endings are kept as they are.
    """

    if not is_substitutable(path.name):
        return False
    try:
        content = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProjectIOError("File is not valid UTF-8 text", path=path) from exc
    path.write_bytes(substitute_content(content, params).encode("utf-8"))
    return True


class ArchiveExtractor:
    def extract(self, archive: Path, destination: Path, params: NamingParameters) -> List[ExtractionEntry]:
        try:
            stream = archive.open("rb")
        except OSError as exc:
            raise ProjectIOError(f"Cannot open template archive: {exc}", path=archive) from exc
        with stream:
            return self.extract_stream(stream, destination, params)

    def extract_stream(self, stream: BinaryIO, destination: Path, params: NamingParameters) -> List[ExtractionEntry]:
        entries: List[ExtractionEntry] = []
        root = destination.resolve()
        try:
            with self._open(stream) as tar:
                while True:
                    member = self._next_member(tar)
                    if member is None:
                        break
                    entry = self._materialize(tar, member, root, params)
                    if entry is not None:
                        entries.append(entry)
        except TemplaterError:
            raise
        except OSError as exc:
            raise ProjectIOError(f"Cannot write archive entry: {exc}", path=exc.filename) from exc
        return entries

    def _open(self, stream: BinaryIO) -> tarfile.TarFile:
        try:
            return tarfile.open(fileobj=stream, mode="r|gz")
        except _CORRUPT_ERRORS as exc:
            raise ArchiveCorruptError(f"Template archive is not a readable tar.gz stream: {exc}") from exc

    def _next_member(self, tar: tarfile.TarFile) -> tarfile.TarInfo | None:
        try:
            return tar.next()
        except _CORRUPT_ERRORS as exc:
            raise ArchiveCorruptError(f"Template archive is corrupt: {exc}") from exc

    def _materialize(
        self,
        tar: tarfile.TarFile,
        member: tarfile.TarInfo,
        root: Path,
        params: NamingParameters,
    ) -> ExtractionEntry | None:
        if not (member.isdir() or member.isfile()):
            return None
        relative = substitute_path(member.name, params)
        target = self._resolve_target(root, relative, member.name)

        if member.isdir():
            target.mkdir(parents=True, exist_ok=True)
            return ExtractionEntry(raw_name=member.name, relative_path=relative, kind="directory", target=target)

        target.parent.mkdir(parents=True, exist_ok=True)
        source = self._payload(tar, member)
        with target.open("wb") as out:
            while True:
                chunk = self._read_chunk(source, member)
                if not chunk:
                    break
                out.write(chunk)
        substituted = substitute_file(target, params)
        return ExtractionEntry(
            raw_name=member.name,
            relative_path=relative,
            kind="file",
            target=target,
            substituted=substituted,
        )

    def _resolve_target(self, root: Path, relative: str, raw_name: str) -> Path:
        candidate = (root / relative).resolve()
        if candidate != root and root not in candidate.parents:
            raise ProjectIOError("Archive entry resolves outside the destination", entry=raw_name, path=relative)
        return candidate

    def _payload(self, tar: tarfile.TarFile, member: tarfile.TarInfo) -> BinaryIO:
        try:
            source = tar.extractfile(member)
        except _CORRUPT_ERRORS as exc:
            raise ArchiveCorruptError(f"Cannot read archive entry: {exc}", entry=member.name) from exc
        if source is None:
            raise ArchiveCorruptError("Archive entry has no payload", entry=member.name)
        return source

    def _read_chunk(self, source: BinaryIO, member: tarfile.TarInfo) -> bytes:
        try:
            return source.read(CHUNK_SIZE)
        except _CORRUPT_ERRORS as exc:
            raise ArchiveCorruptError(f"Archive entry is truncated: {exc}", entry=member.name) from exc


__all__ = ["ArchiveExtractor", "ExtractionEntry", "substitute_file"]
