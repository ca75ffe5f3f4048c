"""Build descriptor and properties file written next to an extracted project."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from templater.domain.naming import NamingParameters

CONFIG_FILENAME = "robovm.xml"
PROPERTIES_FILENAME = "robovm.properties"
INFO_PLIST_FILENAME = "Info.plist.xml"
RESOURCES_DIRNAME = "resources"

MAIN_CLASS_REFERENCE = "${app.mainclass}"
EXECUTABLE_REFERENCE = "${app.executable}"


@dataclass(frozen=True)
class BuildSettings:
    os: str = "ios"
    arch: str = "thumbv7"
    target_type: str = "ios"
    version: str = "1.0"
    build: str = "1"


@dataclass(frozen=True)
class GeneratedArtifacts:
    config_file: Path
    properties_file: Path
    resources_dir: Path
    info_plist: Path
    properties: dict[str, str]

    def as_dict(self) -> dict[str, object]:
        return {
            "config": str(self.config_file),
            "properties": str(self.properties_file),
            "resources": str(self.resources_dir),
            "info_plist": str(self.info_plist),
        }


def build_properties(params: NamingParameters, settings: BuildSettings) -> dict[str, str]:
    return {
        "app.mainclass": params.main_class,
        "app.name": params.app_name,
        "app.executable": params.executable,
        "app.id": params.app_id,
        "app.version": settings.version,
        "app.build": settings.build,
    }


def build_config(settings: BuildSettings) -> ET.Element:
    """Config descriptor; main class and executable stay as property references."""

    config = ET.Element("config")
    ET.SubElement(config, "executableName").text = EXECUTABLE_REFERENCE
    ET.SubElement(config, "mainClass").text = MAIN_CLASS_REFERENCE
    ET.SubElement(config, "os").text = settings.os
    ET.SubElement(config, "arch").text = settings.arch
    ET.SubElement(config, "target").text = settings.target_type
    # Referenced by convention; the template is expected to ship it.
    ET.SubElement(config, "iosInfoPList").text = INFO_PLIST_FILENAME
    resources = ET.SubElement(config, "resources")
    resource = ET.SubElement(resources, "resource")
    ET.SubElement(resource, "directory").text = RESOURCES_DIRNAME
    return config


def _escape_property(text: str, *, is_key: bool) -> str:
    out: list[str] = []
    for index, char in enumerate(text):
        if char == "\\":
            out.append("\\\\")
        elif char == " " and (is_key or index == 0):
            out.append("\\ ")
        elif char == "\t":
            out.append("\\t")
        elif char == "\n":
            out.append("\\n")
        elif char == "\r":
            out.append("\\r")
        elif char == "\f":
            out.append("\\f")
        elif char in "=:#!":
            out.append("\\" + char)
        else:
            out.append(char)
    return "".join(out)


def render_properties(properties: dict[str, str], comment: str = "") -> str:
    lines = [f"#{comment}"]
    for key, value in properties.items():
        lines.append(f"{_escape_property(key, is_key=True)}={_escape_property(value, is_key=False)}")
    return "\n".join(lines) + "\n"


def write_artifacts(
    project_root: Path,
    params: NamingParameters,
    settings: BuildSettings | None = None,
) -> GeneratedArtifacts:
    settings = settings or BuildSettings()
    resources_dir = project_root / RESOURCES_DIRNAME
    resources_dir.mkdir(parents=True, exist_ok=True)

    config_file = project_root / CONFIG_FILENAME
    tree = ET.ElementTree(build_config(settings))
    ET.indent(tree, space="  ")
    tree.write(config_file, encoding="utf-8", xml_declaration=True)

    properties = build_properties(params, settings)
    properties_file = project_root / PROPERTIES_FILENAME
    properties_file.write_text(render_properties(properties), encoding="utf-8")

    return GeneratedArtifacts(
        config_file=config_file,
        properties_file=properties_file,
        resources_dir=resources_dir,
        info_plist=project_root / INFO_PLIST_FILENAME,
        properties=properties,
    )


__all__ = [
    "BuildSettings",
    "CONFIG_FILENAME",
    "GeneratedArtifacts",
    "PROPERTIES_FILENAME",
    "build_config",
    "build_properties",
    "render_properties",
    "write_artifacts",
]
