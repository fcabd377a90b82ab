"""Workout description codec.

Packs StructuredMetrics into the single free-text `description` column of a
workout record and recovers them again. Encoding writes one labeled line per
populated metric, followed by the free-text notes:

    Duration: 1h 30m
    Distance: 5.2 miles
    Avg Speed: 6.0 miles/hr
    Felt great

Decoding is line oriented, order independent and total. Besides the labeled
lines above it understands the older free-text conventions ("3.1 miles",
"Location: Boulder, ...") and keeps every line it cannot classify in `notes`.
It never raises.
"""

from __future__ import annotations

import re
from typing import Any, Callable

from loguru import logger

from app.tracker.activity import ActivityKind, tracks_speed
from app.tracker.models import DistanceUnit, StructuredMetrics, is_number

_HOURS_RE = re.compile(r"(?<![\d.])(\d+)\s*h", re.IGNORECASE)
_MINUTES_RE = re.compile(r"(?<![\d.])(\d+)\s*m", re.IGNORECASE)
_MILEAGE_RE = re.compile(r"(?<![\w.])(\d+(?:\.\d+)?|\.\d+)\s*(?:miles|mi)\b", re.IGNORECASE)
_INLINE_LOCATION_RE = re.compile(r"\b(?:location|at):\s*([^,\n]*)", re.IGNORECASE)


def _label(*names: str) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(n) for n in names)
    return re.compile(rf"^\s*(?:{alternatives}):\s*(.*)$", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def _present(value: str) -> bool:
    """Numeric text that is neither empty nor zero."""
    value = value.strip()
    return bool(value) and is_number(value) and float(value) != 0.0


def encode(
    metrics: StructuredMetrics,
    kind: ActivityKind | str | None = None,
    notes: str | None = None,
) -> str:
    """Serialize metrics into a description string.

    `notes` overrides `metrics.notes` when given. Speed lines are only
    written for kinds that track speed; their unit follows the distance unit.
    """
    lines: list[str] = []

    hours, minutes = metrics.duration_hours, metrics.duration_minutes
    if hours > 0 and minutes > 0:
        lines.append(f"Duration: {hours}h {minutes}m")
    elif hours > 0:
        lines.append(f"Duration: {hours}h")
    elif minutes > 0:
        lines.append(f"Duration: {minutes}m")

    unit = DistanceUnit(metrics.distance_unit).value
    distance = metrics.distance_value.strip() if _present(metrics.distance_value) else ""
    if not distance and _present(metrics.mileage):
        # Legacy mileage is written forward in the labeled format.
        distance, unit = metrics.mileage.strip(), DistanceUnit.miles.value
    if distance:
        lines.append(f"Distance: {distance} {unit}")

    if tracks_speed(kind):
        if _present(metrics.average_speed):
            lines.append(f"Avg Speed: {metrics.average_speed.strip()} {unit}/hr")
        if _present(metrics.fastest_speed):
            lines.append(f"Max Speed: {metrics.fastest_speed.strip()} {unit}/hr")

    location = " ".join(metrics.location.split())
    if location:
        lines.append(f"Location: {location}")

    text = metrics.notes if notes is None else notes
    if text:
        lines.append(text)

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def _parse_duration(rest: str) -> dict[str, Any]:
    hours = _HOURS_RE.search(rest)
    minutes = _MINUTES_RE.search(rest)
    if hours is None and minutes is None:
        return {}
    h = int(hours.group(1)) if hours else 0
    m = int(minutes.group(1)) if minutes else 0
    return {"duration_hours": h + m // 60, "duration_minutes": m % 60}


def _parse_distance(rest: str) -> dict[str, Any]:
    tokens = rest.split()
    if not tokens or not is_number(tokens[0]):
        return {}
    unit = DistanceUnit.km if len(tokens) > 1 and tokens[1].lower() == "km" else DistanceUnit.miles
    return {"distance_value": tokens[0], "distance_unit": unit}


def _speed_parser(field: str) -> Callable[[str], dict[str, Any]]:
    def parse(rest: str) -> dict[str, Any]:
        # Only the number matters; the "{unit}/hr" suffix follows the distance unit.
        tokens = rest.split()
        if not tokens or not is_number(tokens[0]):
            return {}
        return {field: tokens[0]}

    return parse


def _parse_location(rest: str) -> dict[str, Any]:
    return {"location": rest} if rest else {}


# Checked in this order; the first label that matches a line owns it.
LABEL_PARSERS: list[tuple[re.Pattern[str], Callable[[str], dict[str, Any]]]] = [
    (_label("Duration"), _parse_duration),
    (_label("Distance"), _parse_distance),
    (_label("Avg Speed"), _speed_parser("average_speed")),
    (_label("Max Speed"), _speed_parser("fastest_speed")),
    (_label("Location", "At"), _parse_location),
]


def _split_lines(text: str) -> list[str]:
    return [line.rstrip("\r") for line in text.split("\n")]


def _excise(line: str, match: re.Match[str], joiner: str) -> str:
    """Remove a matched span from a line and stitch the remainder together."""
    head = line[: match.start()].rstrip(" ,;")
    tail = line[match.end() :].lstrip(" ,;")
    if head and tail:
        return f"{head}{joiner}{tail}"
    return head or tail


def _labeled(line: str) -> dict[str, Any] | None:
    """Parse a labeled metric line.

    None when no label matches; an empty dict when the label matched but its
    value could not be parsed.
    """
    for pattern, parser in LABEL_PARSERS:
        match = pattern.match(line)
        if match is not None:
            return parser(match.group(1).strip())
    return None


def _scan_legacy(line: str, fields: dict[str, Any]) -> str | None:
    """Pull inline mileage/location out of a free-text line.

    Returns the remaining text, or None when extraction consumed the whole line.
    """
    original = line

    if "mileage" not in fields:
        match = _MILEAGE_RE.search(line)
        if match is not None:
            fields["mileage"] = match.group(1)
            line = _excise(line, match, " ")

    if "location" not in fields:
        match = _INLINE_LOCATION_RE.search(line)
        if match is not None and match.group(1).strip():
            fields["location"] = match.group(1).strip()
            line = _excise(line, match, ", ")

    if line != original and not line.strip():
        return None
    return line


def _decode_lines(text: str) -> StructuredMetrics:
    fields: dict[str, Any] = {}
    notes: list[str] = []

    for line in _split_lines(text):
        parsed = _labeled(line)
        if parsed is None:
            remainder = _scan_legacy(line, fields)
            if remainder is not None:
                notes.append(remainder)
            continue

        # Unparseable values and repeated fields stay as text; first occurrence wins.
        if not parsed or any(key in fields for key in parsed):
            notes.append(line)
            continue
        fields.update(parsed)

    fields["notes"] = "\n".join(notes)
    return StructuredMetrics(**fields)


def decode(text: str | None) -> StructuredMetrics:
    """Recover metrics from a stored description.

    Total: any string (or None) yields a valid StructuredMetrics. Lines that
    carry no recognizable metric are preserved verbatim in `notes`.
    """
    if not text:
        return StructuredMetrics()
    try:
        return _decode_lines(text)
    except Exception:
        logger.exception("Could not decode workout description; keeping it as notes")
        return StructuredMetrics(notes=text)
