import os

import pytest

from kubectl_wider.errors import FetchError
from kubectl_wider.model import get_name, get_namespace, load_json

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def load_items(name: str) -> list[dict]:
    return load_json(os.path.join(FIXTURES, name))["items"]


class FakeCluster:
    """
    In-memory stand-in for ClusterClient.

    `extra_*` objects exist in the cluster but are missing from bulk
    lists, the way a namespace-scoped list misses other namespaces.
    Every call is recorded in `calls`.
    """

    def __init__(
        self,
        pods=None,
        nodes=None,
        service_accounts=None,
        pvcs=None,
        extra_service_accounts=None,
        extra_pvcs=None,
        fail_lists=(),
    ):
        self.pods = pods or []
        self.nodes = nodes or []
        self.service_accounts = service_accounts or []
        self.pvcs = pvcs or []
        self.extra_service_accounts = extra_service_accounts or []
        self.extra_pvcs = extra_pvcs or []
        self.fail_lists = set(fail_lists)
        self.calls: list[tuple] = []

    @staticmethod
    def _in_namespace(items, namespace):
        if not namespace:
            return list(items)
        return [i for i in items if get_namespace(i) == namespace]

    def _list(self, kind, items, namespace):
        self.calls.append(("list", kind, namespace))
        if kind in self.fail_lists:
            raise FetchError(kind, "Forbidden", namespace=namespace, status=403)
        return self._in_namespace(items, namespace)

    def _get(self, kind, items, namespace, name):
        self.calls.append(("get", kind, namespace, name))
        for obj in items:
            if get_namespace(obj) == namespace and get_name(obj) == name:
                return obj
        raise FetchError(kind, "Not Found", namespace=namespace, name=name, status=404)

    def list_pods(self, namespace=None, label_selector=""):
        pods = self._list("Pod", self.pods, namespace)
        if label_selector:
            key, _, value = label_selector.partition("=")
            pods = [
                p
                for p in pods
                if p.get("metadata", {}).get("labels", {}).get(key) == value
            ]
        return pods

    def list_nodes(self):
        return self._list("Node", self.nodes, None)

    def list_service_accounts(self, namespace=None):
        return self._list("ServiceAccount", self.service_accounts, namespace)

    def list_pvcs(self, namespace=None):
        return self._list("PersistentVolumeClaim", self.pvcs, namespace)

    def get_service_account(self, namespace, name):
        return self._get(
            "ServiceAccount",
            self.service_accounts + self.extra_service_accounts,
            namespace,
            name,
        )

    def get_pvc(self, namespace, name):
        return self._get(
            "PersistentVolumeClaim", self.pvcs + self.extra_pvcs, namespace, name
        )

    def calls_of(self, verb):
        return [c for c in self.calls if c[0] == verb]


@pytest.fixture
def pods():
    return load_items("pods.json")


@pytest.fixture
def nodes():
    return load_items("nodes.json")


@pytest.fixture
def service_accounts():
    return load_items("serviceaccounts.json")


@pytest.fixture
def pvcs():
    return load_items("pvcs.json")


@pytest.fixture
def cluster(pods, nodes, service_accounts, pvcs):
    """
    Bulk lists hold only the default namespace's SAs and PVCs; the
    storage namespace objects are reachable by direct get only.
    """
    return FakeCluster(
        pods=pods,
        nodes=nodes,
        service_accounts=service_accounts,
        pvcs=pvcs,
        extra_service_accounts=[{"metadata": {"name": "db", "namespace": "storage"}}],
        extra_pvcs=[
            {
                "metadata": {"name": "db-data", "namespace": "storage"},
                "status": {"phase": "Bound"},
            }
        ],
    )


@pytest.fixture
def fake_cluster_factory():
    return FakeCluster
