"""Filesystem-backed template repository."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from templater.domain.template import DEFAULT_PREFIX, TemplateCatalog, TemplateHandle
from templater.ports.template_repo import TemplateRepository
from templater.resources import load_catalog_descriptions


class FSTemplateRepository(TemplateRepository):
    """Archives found in local directories; earlier directories win.

    Names missing locally are delegated to ``fallback`` when one is given.
    """

    def __init__(
        self,
        search_dirs: Sequence[Path],
        prefix: str = DEFAULT_PREFIX,
        *,
        fallback: TemplateRepository | None = None,
    ) -> None:
        self._search_dirs = [Path(entry).expanduser() for entry in search_dirs]
        self._prefix = prefix
        self._fallback = fallback
        catalog = TemplateCatalog([])
        for directory in reversed(self._search_dirs):
            scanned = TemplateCatalog.scan(
                directory,
                prefix,
                origin="local",
                descriptions=load_catalog_descriptions(directory),
            )
            catalog = scanned.merged_with(catalog)
        self._catalog = catalog

    def resolve(self, template: str) -> TemplateHandle:
        if template in self._catalog or self._fallback is None:
            return self._catalog.lookup(template)
        return self._fallback.resolve(template)

    def list_templates(self) -> Iterable[TemplateHandle]:
        if self._fallback is None:
            return self._catalog.handles()
        fallback_catalog = TemplateCatalog(self._fallback.list_templates())
        return self._catalog.merged_with(fallback_catalog).handles()
