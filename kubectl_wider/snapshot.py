from dataclasses import dataclass, field
from typing import Any

from kubectl_wider.model import get_name, get_namespace


@dataclass(frozen=True)
class CompositeRecord:
    """
    One Pod joined with its Node, ServiceAccount and bound PVCs.

    The related objects are references into the bulk lists (or single
    fetched objects); nothing here copies or modifies them.
    """

    pod: dict[str, Any]
    node: dict[str, Any] | None = None
    service_account: dict[str, Any] | None = None
    pvcs: tuple[dict[str, Any], ...] = field(default_factory=tuple)

    @property
    def pod_name(self) -> str:
        return get_name(self.pod) or "<unknown>"

    @property
    def namespace(self) -> str:
        return get_namespace(self.pod)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pod": self.pod,
            "node": self.node,
            "serviceAccount": self.service_account,
            "pvcs": list(self.pvcs),
        }
