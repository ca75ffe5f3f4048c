"""Port definitions for template storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from templater.domain.errors import TemplateNotFoundError
from templater.domain.template import TemplateHandle

__all__ = ["TemplateNotFoundError", "TemplateRepository"]


class TemplateRepository(ABC):
    @abstractmethod
    def resolve(self, template: str) -> TemplateHandle:
        """Return the handle for ``template`` or raise TemplateNotFoundError."""

    @abstractmethod
    def list_templates(self) -> Iterable[TemplateHandle]:
        """List available templates sorted by name."""
