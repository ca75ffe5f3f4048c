"""Generation telemetry: opt-out JSONL event log and the report built from it.

Writing an event never interrupts generation. When the log cannot be written
the event is dropped and ``record_structured_event`` returns ``False``.
Malformed events (unknown level, schema violations) still raise, since those
are programming errors rather than environment failures.
"""

from __future__ import annotations

import json
import os
import time
from collections import deque
from functools import lru_cache
from importlib import resources
from typing import Any, Iterable, Iterator

import jsonschema

from templater.settings import RuntimeSettings

LEVELS = {"info", "warn", "error"}
GENERATE_EVENT = "generate"
GENERATE_FAILED_EVENT = "generate.failed"

_DISABLE_VALUES = {"0", "false", "no", "off"}


def telemetry_enabled() -> bool:
    return os.getenv("TEMPLATER_TELEMETRY", "1").lower() not in _DISABLE_VALUES


def record_event(settings: RuntimeSettings, event: str, payload: dict[str, Any] | None = None, **extra: Any) -> bool:
    return record_structured_event(settings, event, payload=payload, **extra)


def record_structured_event(
    settings: RuntimeSettings,
    event: str,
    *,
    payload: dict[str, Any] | None = None,
    level: str = "info",
    status: str | None = None,
    component: str | None = None,
    correlation_id: str | None = None,
    duration_ms: float | None = None,
) -> bool:
    """Append one event; returns whether it reached the log."""

    if not telemetry_enabled():
        return False
    if level not in LEVELS:
        raise ValueError(f"Telemetry level '{level}' is not supported")
    record: dict[str, Any] = {"ts": time.time(), "event": event, "payload": payload or {}, "level": level}
    optional = {"status": status, "component": component, "correlationId": correlation_id, "durationMs": duration_ms}
    record.update((key, value) for key, value in optional.items() if value is not None)
    _schema_validator().validate(record)

    log_path = settings.telemetry_file
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
    except OSError:
        return False
    return True


def iter_events(settings: RuntimeSettings, *, recent: int = 0) -> Iterator[dict[str, Any]]:
    """Yield logged events in order; ``recent`` keeps only the last N."""

    log_path = settings.telemetry_file
    try:
        with log_path.open("r", encoding="utf-8") as fh:
            events = _parse_lines(fh)
            if recent > 0:
                events = iter(deque(events, maxlen=recent))
            yield from events
    except (FileNotFoundError, NotADirectoryError):
        return


def _parse_lines(lines: Iterable[str]) -> Iterator[dict[str, Any]]:
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            evt = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(evt, dict):
            yield evt


def generation_report(events: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Aggregate generate/generate.failed events per template."""

    templates: dict[str, dict[str, Any]] = {}
    errors: dict[str, int] = {}
    total = 0
    for evt in events:
        name = evt.get("event")
        if name not in (GENERATE_EVENT, GENERATE_FAILED_EVENT):
            continue
        total += 1
        payload = evt.get("payload") or {}
        stats = templates.setdefault(
            str(payload.get("template", "unknown")),
            {"succeeded": 0, "failed": 0, "durationMs": 0.0},
        )
        if name == GENERATE_EVENT:
            stats["succeeded"] += 1
        else:
            stats["failed"] += 1
            error_type = (payload.get("error") or {}).get("error", "unknown")
            errors[error_type] = errors.get(error_type, 0) + 1
        stats["durationMs"] += float(evt.get("durationMs") or 0.0)

    for stats in templates.values():
        runs = stats["succeeded"] + stats["failed"]
        stats["meanDurationMs"] = round(stats.pop("durationMs") / runs, 3)
    return {
        "generations": total,
        "succeeded": sum(stats["succeeded"] for stats in templates.values()),
        "failed": sum(stats["failed"] for stats in templates.values()),
        "templates": dict(sorted(templates.items())),
        "errors": dict(sorted(errors.items())),
    }


@lru_cache(maxsize=1)
def _schema_validator() -> jsonschema.Draft202012Validator:
    schema_resource = resources.files("templater.resources") / "telemetry.schema.json"
    return jsonschema.Draft202012Validator(json.loads(schema_resource.read_text(encoding="utf-8")))


__all__ = [
    "GENERATE_EVENT",
    "GENERATE_FAILED_EVENT",
    "generation_report",
    "iter_events",
    "record_event",
    "record_structured_event",
    "telemetry_enabled",
]
