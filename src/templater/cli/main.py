#!/usr/bin/env python3
"""Entry point for the templater CLI."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from textwrap import dedent
from typing import NoReturn

from templater import __version__
from templater.adapters.fs_template_repo import FSTemplateRepository
from templater.adapters.packaged_template_repo import PackagedTemplateRepository
from templater.app.generator import ProjectGenerator
from templater.domain.errors import InvalidArgumentError, TemplaterError
from templater.ports.template_repo import TemplateRepository
from templater.settings import SETTINGS
from templater.utils.telemetry import generation_report, iter_events, record_event

HELP_TEXT = dedent(
    """
    Generates a new project from a template

    Usage: templater
    -t <TEMPLATE>       template (required)
    -c <CLASS>          main class (required)
    -p <PACKAGE>        package name
    -n <NAME>           app name
    -i <ID>             app id
    -e <EXECUTABLE>     executable name
    -g <PROJECT_ROOT>   generates project to project root (required)
    --list              list available templates
    --report [N]        summarise recorded generations (last N events)
    """
)

_STANDALONE_FLAGS = {"--list", "--report", "--version", "-h", "--help"}


class _ArgumentParser(argparse.ArgumentParser):
    """Raise on malformed arguments instead of exiting the process."""

    def error(self, message: str) -> NoReturn:
        raise InvalidArgumentError(message)


def _build_template_repo() -> TemplateRepository:
    packaged = PackagedTemplateRepository(SETTINGS.template_prefix)
    if not SETTINGS.template_dirs:
        return packaged
    return FSTemplateRepository(SETTINGS.template_dirs, SETTINGS.template_prefix, fallback=packaged)


def _build_generator() -> ProjectGenerator:
    return ProjectGenerator(_build_template_repo(), SETTINGS)


def _print_help() -> None:
    print(f"templater {__version__}")
    print(HELP_TEXT.strip("\n"))


def _list_cmd(args: argparse.Namespace) -> int:
    templates = list(_build_template_repo().list_templates())
    record_event(SETTINGS, "templates", {"count": len(templates)})
    if args.json:
        print(json.dumps([handle.as_dict() for handle in templates], ensure_ascii=False, indent=2))
        return 0
    if not templates:
        print("No templates available", file=sys.stderr)
        return 1
    for handle in templates:
        suffix = f"\t{handle.description}" if handle.description else ""
        print(f"{handle.name}{suffix}")
    return 0


def _report_cmd(args: argparse.Namespace) -> int:
    report = generation_report(iter_events(SETTINGS, recent=args.report))
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


def _generate_cmd(args: argparse.Namespace) -> int:
    if not args.template or not args.main_class or not args.project_root:
        _print_help()
        return 0
    generator = _build_generator()
    try:
        result = generator.build_project(
            args.template,
            Path(args.project_root),
            main_class=args.main_class,
            package_name=args.package_name,
            app_name=args.app_name,
            app_id=args.app_id,
            executable=args.executable,
        )
    except InvalidArgumentError as exc:
        print(f"invalid argument: {exc}", file=sys.stderr)
        return 2
    except TemplaterError as exc:
        print(f"generation error: {exc}", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(result.as_dict(), ensure_ascii=False, indent=2))
    else:
        print(f"Project with template '{result.template}' successfully created in: {result.destination}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="templater",
        description="Generates a new project from a template",
        add_help=True,
    )
    parser.add_argument("--version", action="version", version=f"templater {__version__}")
    parser.add_argument("-t", dest="template", metavar="TEMPLATE", help="Template name (required)")
    parser.add_argument("-c", dest="main_class", metavar="CLASS", help="Main class, e.g. com.company.app.Main (required)")
    parser.add_argument("-p", dest="package_name", metavar="PACKAGE", help="Package name")
    parser.add_argument("-n", dest="app_name", metavar="NAME", help="App name")
    parser.add_argument("-i", dest="app_id", metavar="ID", help="App id")
    parser.add_argument("-e", dest="executable", metavar="EXECUTABLE", help="Executable name")
    parser.add_argument("-g", dest="project_root", metavar="PROJECT_ROOT", help="Generates project to project root (required)")
    parser.add_argument("--list", action="store_true", help="List available templates")
    parser.add_argument("--json", action="store_true", help="Emit machine-readable output")
    parser.add_argument(
        "--report",
        nargs="?",
        type=int,
        const=0,
        default=None,
        metavar="N",
        help="Summarise recorded generations, optionally over the last N events",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    raw_args = sys.argv[1:] if argv is None else list(argv)
    if len(raw_args) <= 1 and not _STANDALONE_FLAGS.intersection(raw_args):
        _print_help()
        return 0
    parser = build_parser()
    try:
        args = parser.parse_args(raw_args)
    except InvalidArgumentError as exc:
        print(f"invalid argument: {exc}", file=sys.stderr)
        return 2
    if args.list:
        return _list_cmd(args)
    if args.report is not None:
        return _report_cmd(args)
    return _generate_cmd(args)


if __name__ == "__main__":
    sys.exit(main())
