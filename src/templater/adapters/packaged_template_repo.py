"""Template repository backed by archives shipped inside the package."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from templater.domain.template import DEFAULT_PREFIX, TemplateCatalog, TemplateHandle
from templater.ports.template_repo import TemplateRepository
from templater.resources import packaged_catalog_descriptions, templates_root


@lru_cache(maxsize=None)
def packaged_catalog(prefix: str = DEFAULT_PREFIX) -> TemplateCatalog:
    return TemplateCatalog.scan(
        templates_root(),
        prefix,
        origin="resource",
        descriptions=packaged_catalog_descriptions(),
    )


class PackagedTemplateRepository(TemplateRepository):
    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self._prefix = prefix

    @property
    def catalog(self) -> TemplateCatalog:
        return packaged_catalog(self._prefix)

    def resolve(self, template: str) -> TemplateHandle:
        return self.catalog.lookup(template)

    def list_templates(self) -> Iterable[TemplateHandle]:
        return self.catalog.handles()
