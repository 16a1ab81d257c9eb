from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from kubectl_wider.model import get_name, get_namespace, namespaced_key

ResourceIndex = Mapping[str, dict[str, Any]]


def index_by_name(items: Iterable[dict[str, Any]]) -> ResourceIndex:
    """Cluster-scoped kinds (Nodes): keyed by metadata.name."""
    return MappingProxyType({get_name(obj): obj for obj in items})


def index_by_namespaced_name(items: Iterable[dict[str, Any]]) -> ResourceIndex:
    """Namespaced kinds (ServiceAccounts, PVCs): keyed by namespace/name."""
    return MappingProxyType(
        {namespaced_key(get_namespace(obj), get_name(obj)): obj for obj in items}
    )


EMPTY_INDEX: ResourceIndex = MappingProxyType({})
