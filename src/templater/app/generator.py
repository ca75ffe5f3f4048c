"""Application service that turns a template archive into a project."""

from __future__ import annotations

import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from templater.app.artifacts import BuildSettings, GeneratedArtifacts, write_artifacts
from templater.app.extractor import ArchiveExtractor, ExtractionEntry
from templater.domain.errors import InvalidArgumentError, ProjectIOError, TemplaterError
from templater.domain.naming import NamingParameters, resolve_naming
from templater.domain.template import TemplateHandle
from templater.ports.template_repo import TemplateRepository
from templater.settings import RuntimeSettings
from templater.utils.telemetry import GENERATE_EVENT, GENERATE_FAILED_EVENT, record_structured_event


@dataclass(frozen=True)
class GenerationResult:
    template: str
    destination: Path
    params: NamingParameters
    entries: List[ExtractionEntry] = field(default_factory=list)
    artifacts: GeneratedArtifacts | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "template": self.template,
            "destination": str(self.destination),
            "naming": self.params.as_dict(),
            "entries": [entry.as_dict() for entry in self.entries],
            "artifacts": self.artifacts.as_dict() if self.artifacts else None,
        }


class ProjectGenerator:
    def __init__(
        self,
        template_repo: TemplateRepository,
        settings: RuntimeSettings,
        *,
        extractor: ArchiveExtractor | None = None,
        build_settings: BuildSettings | None = None,
    ) -> None:
        self._templates = template_repo
        self._settings = settings
        self._extractor = extractor or ArchiveExtractor()
        self._build_settings = build_settings or BuildSettings()

    def build_project(
        self,
        template: str,
        destination: Path | str | None,
        *,
        main_class: str | None,
        package_name: str | None = None,
        app_name: str | None = None,
        app_id: str | None = None,
        executable: str | None = None,
    ) -> GenerationResult:
        handle = self._templates.resolve(template)
        params = resolve_naming(
            main_class,
            package_name=package_name,
            app_name=app_name,
            app_id=app_id,
            executable=executable,
        )
        return self.generate(handle, params, destination)

    def generate(
        self,
        template: TemplateHandle,
        params: NamingParameters,
        destination: Path | str | None,
    ) -> GenerationResult:
        if destination is None or str(destination) == "":
            raise InvalidArgumentError("No project root specified", template=template.name)
        if params is None or not params.main_class:
            raise InvalidArgumentError("No main class specified", template=template.name)

        project_root = Path(destination).expanduser()
        started = time.monotonic()
        try:
            entries, artifacts = self._run(template, params, project_root)
        except TemplaterError as exc:
            exc.add_context(template=template.name, destination=project_root)
            self._record(GENERATE_FAILED_EVENT, template, project_root, started, error=exc, level="error")
            raise
        except (OSError, UnicodeError) as exc:
            error = ProjectIOError(f"Project generation failed: {exc}", template=template.name, destination=project_root)
            self._record(GENERATE_FAILED_EVENT, template, project_root, started, error=error, level="error")
            raise error from exc

        result = GenerationResult(
            template=template.name,
            destination=project_root.resolve(),
            params=params,
            entries=entries,
            artifacts=artifacts,
        )
        self._record(GENERATE_EVENT, template, result.destination, started, entries=len(entries))
        return result

    def _run(
        self,
        template: TemplateHandle,
        params: NamingParameters,
        project_root: Path,
    ) -> tuple[List[ExtractionEntry], GeneratedArtifacts]:
        try:
            project_root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProjectIOError(f"Cannot create project root: {exc}", path=project_root) from exc

        archive = project_root / template.transient_name
        try:
            self._materialize(template, archive)
            entries = self._extractor.extract(archive, project_root, params)
        finally:
            self._discard(archive)
        artifacts = write_artifacts(project_root, params, self._build_settings)
        return entries, artifacts

    def _materialize(self, template: TemplateHandle, archive: Path) -> None:
        with template.open() as source, archive.open("wb") as target:
            shutil.copyfileobj(source, target)

    def _discard(self, archive: Path) -> None:
        try:
            archive.unlink(missing_ok=True)
        except OSError as exc:
            record_structured_event(
                self._settings,
                "generate.cleanup_failed",
                payload={"archive": str(archive), "error": str(exc)},
                level="warn",
                component="generator",
            )

    def _record(
        self,
        event: str,
        template: TemplateHandle,
        destination: Path,
        started: float,
        *,
        level: str = "info",
        error: TemplaterError | None = None,
        **extra: Any,
    ) -> None:
        payload: dict[str, Any] = {"template": template.name, "destination": str(destination), **extra}
        if error is not None:
            payload["error"] = error.to_dict()
        record_structured_event(
            self._settings,
            event,
            payload=payload,
            level=level,
            status="error" if error is not None else "success",
            component="generator",
            duration_ms=(time.monotonic() - started) * 1000,
        )


__all__ = ["GenerationResult", "ProjectGenerator"]
