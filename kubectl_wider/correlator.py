import logging
from collections.abc import Iterable
from typing import Any, Protocol

from kubectl_wider.errors import FetchError
from kubectl_wider.index import EMPTY_INDEX, ResourceIndex
from kubectl_wider.model import (
    get_namespace,
    get_pod_claim_names,
    get_pod_node_name,
    get_pod_service_account,
    namespaced_key,
)
from kubectl_wider.planner import DependencyNeeds
from kubectl_wider.snapshot import CompositeRecord

logger = logging.getLogger(__name__)


class SingleObjectFetcher(Protocol):
    def get_service_account(self, namespace: str, name: str) -> dict[str, Any]: ...

    def get_pvc(self, namespace: str, name: str) -> dict[str, Any]: ...


def _resolve_service_account(
    pod: dict[str, Any],
    sa_index: ResourceIndex,
    fetcher: SingleObjectFetcher | None,
) -> dict[str, Any] | None:
    name = get_pod_service_account(pod)
    if not name:
        return None

    namespace = get_namespace(pod)
    sa = sa_index.get(namespaced_key(namespace, name))
    if sa is not None or fetcher is None:
        return sa

    try:
        return fetcher.get_service_account(namespace, name)
    except FetchError as exc:
        logger.debug("service account left empty: %s", exc)
        return None


def _resolve_pvcs(
    pod: dict[str, Any],
    pvc_index: ResourceIndex,
    fetcher: SingleObjectFetcher | None,
) -> tuple[dict[str, Any], ...]:
    namespace = get_namespace(pod)
    resolved = []
    for claim in get_pod_claim_names(pod):
        pvc = pvc_index.get(namespaced_key(namespace, claim))
        if pvc is None and fetcher is not None:
            try:
                pvc = fetcher.get_pvc(namespace, claim)
            except FetchError as exc:
                logger.debug("claim skipped: %s", exc)
        if pvc is not None:
            resolved.append(pvc)
    return tuple(resolved)


def correlate(
    pods: Iterable[dict[str, Any]],
    node_index: ResourceIndex,
    sa_index: ResourceIndex = EMPTY_INDEX,
    pvc_index: ResourceIndex = EMPTY_INDEX,
    fetcher: SingleObjectFetcher | None = None,
    needs: DependencyNeeds | None = None,
) -> list[CompositeRecord]:
    """
    Join every Pod with its Node, ServiceAccount and PVCs, in pod order.

    - Node: looked up by spec.nodeName; unscheduled pods or deleted nodes
      leave it empty
    - ServiceAccount / PVCs: index first, then a direct get through
      `fetcher` on a miss; a failed get leaves the field empty (or drops
      that claim) instead of failing the run
    - Kinds not requested by `needs` are never resolved
    """
    if needs is None:
        needs = DependencyNeeds(needs_service_account=True, needs_pvc=True)

    records = []
    for pod in pods:
        node_name = get_pod_node_name(pod)
        node = node_index.get(node_name) if node_name else None

        sa = None
        if needs.needs_service_account:
            sa = _resolve_service_account(pod, sa_index, fetcher)

        pvcs: tuple[dict[str, Any], ...] = ()
        if needs.needs_pvc:
            pvcs = _resolve_pvcs(pod, pvc_index, fetcher)

        records.append(
            CompositeRecord(pod=pod, node=node, service_account=sa, pvcs=pvcs)
        )
    return records
