import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from kubectl_wider.errors import ColumnSpecError
from kubectl_wider.snapshot import CompositeRecord

NONE_CELL = "<none>"

# Top-level fields of a composite record, with the short aliases
# accepted in column paths.
RECORD_FIELDS = {
    "pod": "pod",
    "node": "node",
    "serviceAccount": "serviceAccount",
    "sa": "serviceAccount",
    "pvcs": "pvcs",
    "pvc": "pvcs",
}


@dataclass(frozen=True)
class PathSegment:
    """
    One step of a column path.

    `escaped` marks tokens that contained a literal dot (written `\\.`);
    such a token can only be a map key, e.g. a label or annotation name.
    `index` is None, a list position, or "*" for every element.
    """

    token: str
    escaped: bool = False
    index: int | str | None = None


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    path: tuple[PathSegment, ...]


# ----------------------------
# Parsing
# ----------------------------


def _split_index(raw: str, path: str) -> tuple[str, int | str | None]:
    if not raw.endswith("]") or "[" not in raw:
        return raw, None

    token, _, idx = raw[:-1].rpartition("[")
    if idx == "*":
        return token, "*"
    try:
        return token, int(idx)
    except ValueError:
        raise ColumnSpecError(f"invalid index [{idx}] in path {path!r}") from None


def _finish_segment(raw: str, escaped: bool, path: str) -> PathSegment:
    token, index = _split_index(raw, path)
    if not token:
        raise ColumnSpecError(f"empty segment in path {path!r}")
    return PathSegment(token=token, escaped=escaped, index=index)


def split_path(path: str) -> tuple[PathSegment, ...]:
    """
    Split a dotted field path into segments.

    `\\.` is a literal dot inside a segment; every other `.` separates
    segments. A leading dot and kubectl-style `{...}` braces are optional:

        .node.metadata.labels.kubernetes\\.io/os
          -> node | metadata | labels | kubernetes.io/os
    """
    expr = path.strip()
    if expr.startswith("{") and expr.endswith("}"):
        expr = expr[1:-1]
    if expr.startswith("."):
        expr = expr[1:]
    if not expr:
        raise ColumnSpecError(f"empty field path {path!r}")

    segments = []
    buf: list[str] = []
    escaped = False
    i = 0
    while i < len(expr):
        ch = expr[i]
        if ch == "\\" and i + 1 < len(expr) and expr[i + 1] == ".":
            buf.append(".")
            escaped = True
            i += 2
            continue
        if ch == ".":
            segments.append(_finish_segment("".join(buf), escaped, path))
            buf, escaped = [], False
        else:
            buf.append(ch)
        i += 1
    segments.append(_finish_segment("".join(buf), escaped, path))

    return tuple(segments)


def parse_column_spec(spec: str) -> ColumnSpec:
    """Parse one NAME:PATH entry, splitting at the first colon."""
    name, sep, path = spec.partition(":")
    name = name.strip()
    if not sep:
        raise ColumnSpecError(
            f"invalid custom-columns entry {spec!r}, expected NAME:PATH"
        )
    if not name:
        raise ColumnSpecError(f"missing column name in {spec!r}")
    return ColumnSpec(name=name, path=split_path(path))


def parse_columns(specs: str) -> list[ColumnSpec]:
    """Parse a comma-separated list of NAME:PATH entries."""
    if not specs.strip():
        raise ColumnSpecError("custom-columns format requires at least one column")
    return [parse_column_spec(entry) for entry in specs.split(",")]


# ----------------------------
# Resolution
# ----------------------------


def _walk(value: Any, path: Sequence[PathSegment]) -> list[Any]:
    if not path:
        return [value]
    if not isinstance(value, dict):
        return []

    seg, rest = path[0], path[1:]
    if seg.token not in value:
        return []
    child = value[seg.token]

    if seg.index is None:
        return _walk(child, rest)
    if not isinstance(child, list):
        return []
    if seg.index == "*":
        found = []
        for item in child:
            found.extend(_walk(item, rest))
        return found
    try:
        return _walk(child[seg.index], rest)
    except IndexError:
        return []


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    return str(value)


def resolve(record: CompositeRecord, path: Sequence[PathSegment]) -> str:
    """
    Evaluate a parsed path against one record and format the result.

    Missing fields, unset optionals (an unscheduled pod's node) and
    missing map keys all render as <none>.
    """
    if not path:
        return NONE_CELL

    root = path[0]
    field = RECORD_FIELDS.get(root.token)
    if field is None or root.escaped:
        return NONE_CELL

    start = PathSegment(token=field, index=root.index)
    values = [v for v in _walk(record.to_dict(), (start, *path[1:])) if v is not None]
    if not values:
        return NONE_CELL
    return ",".join(_format_value(v) for v in values)


def build_rows(
    records: Iterable[CompositeRecord], columns: Sequence[ColumnSpec]
) -> list[list[str]]:
    return [[resolve(record, col.path) for col in columns] for record in records]
