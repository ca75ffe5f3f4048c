"""Placeholder substitution rules for archive paths and file contents.

Pure text transforms; reading and writing files is left to the extractor.
Every token is matched literally, except the archetype ``#set`` directive
which is a line-level regex.
"""

from __future__ import annotations

import re

from templater.domain.naming import NamingParameters

PACKAGE_FOLDER_PLACEHOLDER = "__packageInPathFormat__"
MAIN_CLASS_FILE_PLACEHOLDER = "__mainClass__"
DOLLAR_SYMBOL_PLACEHOLDER = "${symbol_dollar}"
PACKAGE_PLACEHOLDER = "package ${package};"
MAIN_CLASS_PLACEHOLDER = "${mainClass}"
# Greedy to the end of the line and not anchored at line start. The body never
# crosses a line terminator (\r, \n, \x85, \u2028, \u2029).
ARCHETYPE_SET_DIRECTIVE = re.compile("#set\\([^\r\n\x85\u2028\u2029]*\\)\n")

SUBSTITUTED_EXTENSIONS = frozenset({"xml", "java"})


def file_extension(file_name: str) -> str:
    """Text after the last ``.`` of the final path segment, or ``""``."""

    base = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    _, dot, extension = base.rpartition(".")
    return extension if dot else ""


def is_substitutable(file_name: str) -> bool:
    return file_extension(file_name) in SUBSTITUTED_EXTENSIONS


def substitute_path(entry_name: str, params: NamingParameters) -> str:
    entry_name = entry_name.replace(PACKAGE_FOLDER_PLACEHOLDER, params.package_dir_name)
    entry_name = entry_name.replace(MAIN_CLASS_FILE_PLACEHOLDER, params.main_class_name)
    return entry_name


def package_statement(package_name: str | None) -> str:
    if not package_name:
        return ""
    return f"package {package_name};"


def substitute_content(content: str, params: NamingParameters) -> str:
    """Apply the content pipeline; each step sees the previous step's output."""

    content = ARCHETYPE_SET_DIRECTIVE.sub("", content)
    content = content.replace(DOLLAR_SYMBOL_PLACEHOLDER, "$")
    content = content.replace(PACKAGE_PLACEHOLDER, package_statement(params.package_name))
    content = content.replace(MAIN_CLASS_PLACEHOLDER, params.main_class_name)
    return content


__all__ = [
    "ARCHETYPE_SET_DIRECTIVE",
    "DOLLAR_SYMBOL_PLACEHOLDER",
    "MAIN_CLASS_FILE_PLACEHOLDER",
    "MAIN_CLASS_PLACEHOLDER",
    "PACKAGE_FOLDER_PLACEHOLDER",
    "PACKAGE_PLACEHOLDER",
    "SUBSTITUTED_EXTENSIONS",
    "file_extension",
    "is_substitutable",
    "package_statement",
    "substitute_content",
    "substitute_path",
]
