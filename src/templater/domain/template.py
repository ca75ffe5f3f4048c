"""Domain model for packaged template archives."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterable, Mapping

from templater.domain.errors import TemplateNotFoundError

ARCHIVE_SUFFIX = "-template.tar.gz"
DEFAULT_PREFIX = "robovm"


def archive_name(prefix: str, template: str) -> str:
    return f"{prefix}-{template}{ARCHIVE_SUFFIX}"


def template_name_from_archive(prefix: str, file_name: str) -> str | None:
    """Return the template name encoded in ``file_name``, or ``None``."""

    match = re.fullmatch(rf"{re.escape(prefix)}-(?P<name>.+){re.escape(ARCHIVE_SUFFIX)}", file_name)
    if match is None:
        return None
    return match.group("name")


@dataclass(frozen=True)
class TemplateHandle:
    name: str
    archive_name: str
    locator: Any  # importlib.resources Traversable or pathlib.Path
    origin: str = "resource"
    description: str = ""

    @property
    def transient_name(self) -> str:
        """Archive file name without its final extension (``x-template.tar``)."""

        stem, dot, _ = self.archive_name.rpartition(".")
        return stem if dot else self.archive_name

    def open(self) -> BinaryIO:
        return self.locator.open("rb")

    def as_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "archive": self.archive_name,
            "origin": self.origin,
            "description": self.description,
        }


class TemplateCatalog:
    """Explicit mapping from template name to archive locator."""

    def __init__(self, handles: Iterable[TemplateHandle]) -> None:
        self._handles: dict[str, TemplateHandle] = {}
        for handle in handles:
            self._handles.setdefault(handle.name, handle)

    @classmethod
    def scan(
        cls,
        root: Any,
        prefix: str,
        *,
        origin: str,
        descriptions: Mapping[str, str] | None = None,
    ) -> "TemplateCatalog":
        """Index every ``<prefix>-<name>-template.tar.gz`` directly under ``root``."""

        descriptions = descriptions or {}
        handles: list[TemplateHandle] = []
        if not root.is_dir():
            return cls(handles)
        for entry in sorted(root.iterdir(), key=lambda item: item.name):
            if not entry.is_file():
                continue
            name = template_name_from_archive(prefix, entry.name)
            if name is None:
                continue
            handles.append(
                TemplateHandle(
                    name=name,
                    archive_name=entry.name,
                    locator=entry,
                    origin=origin,
                    description=descriptions.get(name, ""),
                )
            )
        return cls(handles)

    def merged_with(self, other: "TemplateCatalog") -> "TemplateCatalog":
        """Entries of ``self`` take precedence over ``other``."""

        return TemplateCatalog([*self._handles.values(), *other._handles.values()])

    def lookup(self, template: str) -> TemplateHandle:
        if not template:
            raise TemplateNotFoundError("Template name is empty", template=template)
        try:
            return self._handles[template]
        except KeyError:
            raise TemplateNotFoundError(f"Template with name '{template}' doesn't exist!", template=template) from None

    def __contains__(self, template: object) -> bool:
        return template in self._handles

    def handles(self) -> list[TemplateHandle]:
        return [self._handles[name] for name in sorted(self._handles)]
