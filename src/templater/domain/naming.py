"""Naming parameters of a generated project."""

from __future__ import annotations

import os
from dataclasses import dataclass

from templater.domain.errors import InvalidArgumentError


def _or_default(value: str | None, default: str) -> str:
    if value is None or len(value) == 0:
        return default
    return value


@dataclass(frozen=True)
class NamingParameters:
    """Resolved identity of a generated project.

    Built once through :func:`resolve_naming`; every derived field is fixed
    before any file is written.
    """

    main_class: str
    main_class_name: str
    package_name: str
    package_dir_name: str
    app_name: str
    app_id: str
    executable: str

    def __post_init__(self) -> None:
        if not self.main_class:
            raise InvalidArgumentError("No main class specified")

    @classmethod
    def from_main_class(
        cls,
        main_class: str | None,
        *,
        package_name: str | None = None,
        app_name: str | None = None,
        app_id: str | None = None,
        executable: str | None = None,
        separator: str = os.sep,
    ) -> "NamingParameters":
        return resolve_naming(
            main_class,
            package_name=package_name,
            app_name=app_name,
            app_id=app_id,
            executable=executable,
            separator=separator,
        )

    def as_dict(self) -> dict[str, str]:
        return {
            "main_class": self.main_class,
            "main_class_name": self.main_class_name,
            "package_name": self.package_name,
            "package_dir_name": self.package_dir_name,
            "app_name": self.app_name,
            "app_id": self.app_id,
            "executable": self.executable,
        }


def resolve_naming(
    main_class: str | None,
    *,
    package_name: str | None = None,
    app_name: str | None = None,
    app_id: str | None = None,
    executable: str | None = None,
    separator: str = os.sep,
) -> NamingParameters:
    """Derive the full parameter set from ``main_class`` and optional overrides.

    Empty overrides count as unset: ``app_id=""`` resolves exactly like
    ``app_id=None``.
    """

    if main_class is None or len(main_class) == 0:
        raise InvalidArgumentError("No main class specified")

    head, dot, main_class_name = main_class.rpartition(".")
    derived_package = head if dot else ""

    resolved_package = _or_default(package_name, derived_package)
    package_dir_name = resolved_package.replace(".", separator)

    return NamingParameters(
        main_class=main_class,
        main_class_name=main_class_name,
        package_name=resolved_package,
        package_dir_name=package_dir_name,
        app_name=_or_default(app_name, main_class_name),
        app_id=_or_default(app_id, resolved_package),
        executable=_or_default(executable, main_class_name),
    )


__all__ = ["NamingParameters", "resolve_naming"]
