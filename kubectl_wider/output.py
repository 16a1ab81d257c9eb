import json
from collections.abc import Sequence
from typing import Any

import yaml

from kubectl_wider.columns import NONE_CELL, build_rows, parse_columns
from kubectl_wider.errors import UnsupportedOutputFormatError
from kubectl_wider.model import (
    get_label,
    get_name,
    get_pod_claim_names,
    get_pod_node_name,
    get_pod_phase,
    get_pod_service_account,
    node_ready_status,
)
from kubectl_wider.snapshot import CompositeRecord

CUSTOM_COLUMNS_PREFIX = "custom-columns="
SUPPORTED_FORMATS = "json, yaml, custom-columns=..."

DEFAULT_COLUMNS = [
    "NAME",
    "STATUS",
    "NODE",
    "NODE-STATUS",
    "INSTANCE-TYPE",
    "ZONE",
    "SERVICE-ACCOUNT",
    "PVCS",
]

INSTANCE_TYPE_LABEL = "node.kubernetes.io/instance-type"
ZONE_LABEL = "topology.kubernetes.io/zone"

NO_RESOURCES = "No resources found."


class _NoAliasDumper(yaml.SafeDumper):
    """Records share Node and PVC objects; write every record out in full."""

    def ignore_aliases(self, data):
        return True

# ----------------------------
# Validation
# ----------------------------


def validate_output_format(fmt: str) -> None:
    """
    Reject unsupported formats before any cluster call is made.
    Custom column specs are parsed here too so a bad path fails early.
    """
    if fmt in ("", "json", "yaml"):
        return
    if fmt.startswith(CUSTOM_COLUMNS_PREFIX):
        parse_columns(fmt[len(CUSTOM_COLUMNS_PREFIX) :])
        return
    raise UnsupportedOutputFormatError(
        f"unsupported output format: {fmt} (supported: {SUPPORTED_FORMATS})"
    )


# ----------------------------
# Table formatting
# ----------------------------


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """
    Left-aligned columns separated by three spaces, like kubectl's
    tabwriter. The last column is never padded.
    """
    table = [list(headers), *[list(r) for r in rows]]
    widths = [max(len(row[i]) for row in table) for i in range(len(headers))]

    lines = []
    for row in table:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append("   ".join(cells).rstrip())
    return "\n".join(lines) + "\n"


def _or_none(value: str) -> str:
    return value or NONE_CELL


def _service_account_name(record: CompositeRecord) -> str:
    if record.service_account is not None:
        return get_name(record.service_account)
    return get_pod_service_account(record.pod)


def _claim_names(record: CompositeRecord) -> list[str]:
    # resolved claims when enrichment ran, otherwise the names the pod references
    if record.pvcs:
        return [get_name(pvc) for pvc in record.pvcs]
    return get_pod_claim_names(record.pod)


def _default_row(record: CompositeRecord, all_namespaces: bool) -> list[str]:
    node = record.node
    row = [
        record.pod_name,
        get_pod_phase(record.pod),
        _or_none(get_pod_node_name(record.pod)),
        node_ready_status(node) if node else NONE_CELL,
        _or_none(get_label(node, INSTANCE_TYPE_LABEL)),
        _or_none(get_label(node, ZONE_LABEL)),
        _or_none(_service_account_name(record)),
        _or_none(",".join(_claim_names(record))),
    ]
    if all_namespaces:
        row.insert(0, record.namespace)
    return row


def render_default(records: Sequence[CompositeRecord], all_namespaces: bool = False) -> str:
    if not records:
        return NO_RESOURCES + "\n"
    headers = (["NAMESPACE"] if all_namespaces else []) + DEFAULT_COLUMNS
    return format_table(headers, [_default_row(r, all_namespaces) for r in records])


def render_custom_columns(records: Sequence[CompositeRecord], specs: str) -> str:
    columns = parse_columns(specs)
    if not records:
        return NO_RESOURCES + "\n"
    return format_table([c.name for c in columns], build_rows(records, columns))


# ----------------------------
# Dispatch
# ----------------------------


def render(
    records: Sequence[CompositeRecord],
    fmt: str = "",
    *,
    all_namespaces: bool = False,
) -> str:
    """
    Render the joined records in the requested format.

    - custom-columns=...: one column per NAME:PATH entry
    - json / yaml: list of {pod, node, serviceAccount, pvcs}
    - "": the default wide table
    """
    if fmt.startswith(CUSTOM_COLUMNS_PREFIX):
        return render_custom_columns(records, fmt[len(CUSTOM_COLUMNS_PREFIX) :])

    if fmt in ("json", "yaml"):
        data: list[dict[str, Any]] = [r.to_dict() for r in records]
        if fmt == "json":
            return json.dumps(data, indent=2) + "\n"
        return yaml.dump(data, Dumper=_NoAliasDumper, sort_keys=False)

    if fmt:
        raise UnsupportedOutputFormatError(
            f"unsupported output format: {fmt} (supported: {SUPPORTED_FORMATS})"
        )
    return render_default(records, all_namespaces)

