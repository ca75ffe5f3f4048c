from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from templater.adapters.fs_template_repo import FSTemplateRepository
from templater.adapters.packaged_template_repo import PackagedTemplateRepository
from templater.app.generator import ProjectGenerator
from templater.domain.errors import (
    ArchiveCorruptError,
    InvalidArgumentError,
    ProjectIOError,
    TemplateNotFoundError,
)
from templater.domain.naming import resolve_naming
from templater.settings import RuntimeSettings
from templater.utils.telemetry import generation_report, iter_events

MAIN_SOURCE = (
    "#set( $symbol_pound = '#' )\n"
    "#set( $symbol_dollar = '$' )\n"
    "package ${package};\n"
    "\n"
    "public class ${mainClass} {\n"
    "    String home = \"${symbol_dollar}{user.home}\";\n"
    "}\n"
)


@pytest.fixture()
def template_dir(make_archive: Callable[..., Path], tmp_path: Path) -> Path:
    directory = tmp_path / "templates"
    make_archive(
        [
            ("src/", None),
            ("src/main/java/__packageInPathFormat__/__mainClass__.java", MAIN_SOURCE),
            ("Info.plist.xml", "<string>${symbol_dollar}{app.name}</string>\n"),
        ],
        name="robovm-console-template.tar.gz",
        directory=directory,
    )
    (directory / "robovm-broken-template.tar.gz").write_bytes(b"garbage")
    return directory


@pytest.fixture()
def generator(template_dir: Path, runtime_settings: RuntimeSettings) -> ProjectGenerator:
    return ProjectGenerator(FSTemplateRepository([template_dir]), runtime_settings)


def test_build_project_generates_sources_and_artifacts(generator: ProjectGenerator, tmp_path: Path) -> None:
    project_root = tmp_path / "MyApp"

    result = generator.build_project("console", project_root, main_class="com.acme.App")

    assert result.template == "console"
    assert result.destination == project_root.resolve()
    main_source = project_root / "src" / "main" / "java" / "com" / "acme" / "App.java"
    assert main_source.read_text("utf-8") == (
        "package com.acme;\n\npublic class App {\n    String home = \"${user.home}\";\n}\n"
    )
    assert (project_root / "Info.plist.xml").read_text("utf-8") == "<string>${app.name}</string>\n"
    assert (project_root / "robovm.xml").is_file()
    assert (project_root / "robovm.properties").is_file()
    assert (project_root / "resources").is_dir()
    assert not (project_root / "robovm-console-template.tar").exists()
    assert result.artifacts is not None
    assert result.artifacts.properties["app.id"] == "com.acme"


def test_generate_accepts_resolved_handle(
    template_dir: Path, runtime_settings: RuntimeSettings, tmp_path: Path
) -> None:
    repo = FSTemplateRepository([template_dir])
    generator = ProjectGenerator(repo, runtime_settings)
    params = resolve_naming("Main", app_name="Demo")

    result = generator.generate(repo.resolve("console"), params, tmp_path / "demo")

    source = tmp_path / "demo" / "src" / "main" / "java" / "Main.java"
    assert source.read_text("utf-8").startswith("\n\npublic class Main {")
    assert result.artifacts is not None
    assert result.artifacts.properties["app.name"] == "Demo"
    assert result.artifacts.properties["app.id"] == ""


def test_unknown_template_writes_nothing(generator: ProjectGenerator, tmp_path: Path) -> None:
    project_root = tmp_path / "never"

    with pytest.raises(TemplateNotFoundError):
        generator.build_project("missing", project_root, main_class="com.acme.App")

    assert not project_root.exists()


@pytest.mark.parametrize("destination", [None, ""])
def test_missing_destination_is_invalid(generator: ProjectGenerator, destination: str | None) -> None:
    with pytest.raises(InvalidArgumentError):
        generator.build_project("console", destination, main_class="com.acme.App")


def test_missing_main_class_is_invalid(generator: ProjectGenerator, tmp_path: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        generator.build_project("console", tmp_path / "x", main_class=None)
    assert not (tmp_path / "x").exists()


def test_uncreatable_destination_raises_before_extraction(generator: ProjectGenerator, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")

    with pytest.raises(ProjectIOError) as excinfo:
        generator.build_project("console", blocker / "project", main_class="com.acme.App")

    assert isinstance(excinfo.value, OSError)
    assert excinfo.value.context["template"] == "console"
    assert blocker.read_text("utf-8") == "file"


def test_corrupt_archive_aborts_and_cleans_up(generator: ProjectGenerator, tmp_path: Path) -> None:
    project_root = tmp_path / "broken"

    with pytest.raises(ArchiveCorruptError) as excinfo:
        generator.build_project("broken", project_root, main_class="com.acme.App")

    assert excinfo.value.context["template"] == "broken"
    assert "destination" in excinfo.value.context
    assert not (project_root / "robovm-broken-template.tar").exists()
    assert not (project_root / "robovm.xml").exists()
    assert not (project_root / "robovm.properties").exists()


def test_generation_is_recorded_in_telemetry(
    generator: ProjectGenerator, runtime_settings: RuntimeSettings, tmp_path: Path
) -> None:
    generator.build_project("console", tmp_path / "one", main_class="com.acme.App")
    with pytest.raises(ArchiveCorruptError):
        generator.build_project("broken", tmp_path / "two", main_class="com.acme.App")

    events = [(evt["event"], evt.get("status")) for evt in iter_events(runtime_settings)]
    assert ("generate", "success") in events
    assert ("generate.failed", "error") in events


def test_packaged_ios_single_view_template(runtime_settings: RuntimeSettings, tmp_path: Path) -> None:
    generator = ProjectGenerator(PackagedTemplateRepository(), runtime_settings)
    project_root = tmp_path / "ios"

    generator.build_project("ios-single-view", project_root, main_class="com.acme.ios.Main", app_name="Acme")

    java_root = project_root / "src" / "main" / "java" / "com" / "acme" / "ios"
    main_source = (java_root / "Main.java").read_text("utf-8")
    controller = (java_root / "MyViewController.java").read_text("utf-8")
    assert main_source.startswith("package com.acme.ios;\n")
    assert "public class Main extends UIApplicationDelegateAdapter" in main_source
    assert "#set" not in controller
    assert controller.startswith("package com.acme.ios;\n")
    assert "${symbol_dollar}" not in (project_root / "Info.plist.xml").read_text("utf-8")
    assert (project_root / "resources" / "Base.lproj" / "Main.storyboard").is_file()
    assert "app.name=Acme" in (project_root / "robovm.properties").read_text("utf-8")


@pytest.fixture()
def unwritable_settings(tmp_path: Path) -> RuntimeSettings:
    blocker = tmp_path / "home-file"
    blocker.write_text("not a directory", encoding="utf-8")
    return RuntimeSettings(home_dir=blocker, log_dir=blocker / "logs")


def test_unwritable_log_does_not_fail_generation(
    template_dir: Path, unwritable_settings: RuntimeSettings, tmp_path: Path
) -> None:
    generator = ProjectGenerator(FSTemplateRepository([template_dir]), unwritable_settings)

    result = generator.build_project("console", tmp_path / "app", main_class="com.acme.App")

    assert result.artifacts is not None
    assert (tmp_path / "app" / "robovm.properties").is_file()
    assert list(iter_events(unwritable_settings)) == []


def test_unwritable_log_keeps_original_error(
    template_dir: Path, unwritable_settings: RuntimeSettings, tmp_path: Path
) -> None:
    generator = ProjectGenerator(FSTemplateRepository([template_dir]), unwritable_settings)

    with pytest.raises(ArchiveCorruptError):
        generator.build_project("broken", tmp_path / "broken", main_class="com.acme.App")

    assert not (tmp_path / "broken" / "robovm-broken-template.tar").exists()


def test_generation_report_counts_outcomes_per_template(
    generator: ProjectGenerator, runtime_settings: RuntimeSettings, tmp_path: Path
) -> None:
    generator.build_project("console", tmp_path / "one", main_class="com.acme.App")
    generator.build_project("console", tmp_path / "two", main_class="com.acme.App")
    with pytest.raises(ArchiveCorruptError):
        generator.build_project("broken", tmp_path / "three", main_class="com.acme.App")

    report = generation_report(iter_events(runtime_settings))

    assert (report["generations"], report["succeeded"], report["failed"]) == (3, 2, 1)
    assert report["templates"]["console"]["succeeded"] == 2
    assert report["templates"]["broken"]["failed"] == 1
    assert report["errors"] == {"ArchiveCorruptError": 1}
