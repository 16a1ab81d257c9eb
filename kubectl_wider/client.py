import logging
from typing import Any

from kubernetes import client, config
from kubernetes.client import ApiClient, ApiException
from kubernetes.config import ConfigException
from urllib3.exceptions import HTTPError

from kubectl_wider.errors import ConfigError, FetchError

logger = logging.getLogger(__name__)


def _to_dict(api_client: ApiClient, obj: Any) -> dict[str, Any]:
    data = api_client.sanitize_for_serialization(obj)
    md = data.get("metadata") if isinstance(data, dict) else None
    if isinstance(md, dict):
        md.pop("managedFields", None)
    return data


class ClusterClient:
    """
    List/get access to the four kinds kubectl-wider joins.

    Every object is returned as a Kubernetes-shaped dict, the same
    structure `kubectl get -o json` prints. A namespace of None means
    all namespaces.
    """

    def __init__(self, core: client.CoreV1Api, api_client: ApiClient | None = None):
        self.core = core
        self.api_client = api_client or ApiClient()

    # ----------------------------
    # Bulk lists
    # ----------------------------

    def list_pods(
        self, namespace: str | None = None, label_selector: str = ""
    ) -> list[dict[str, Any]]:
        kwargs = {"label_selector": label_selector} if label_selector else {}
        if namespace:
            return self._list(
                "Pod",
                namespace,
                self.core.list_namespaced_pod,
                namespace=namespace,
                **kwargs,
            )
        return self._list("Pod", None, self.core.list_pod_for_all_namespaces, **kwargs)

    def list_nodes(self) -> list[dict[str, Any]]:
        return self._list("Node", None, self.core.list_node)

    def list_service_accounts(self, namespace: str | None = None) -> list[dict[str, Any]]:
        if namespace:
            return self._list(
                "ServiceAccount",
                namespace,
                self.core.list_namespaced_service_account,
                namespace=namespace,
            )
        return self._list(
            "ServiceAccount", None, self.core.list_service_account_for_all_namespaces
        )

    def list_pvcs(self, namespace: str | None = None) -> list[dict[str, Any]]:
        if namespace:
            return self._list(
                "PersistentVolumeClaim",
                namespace,
                self.core.list_namespaced_persistent_volume_claim,
                namespace=namespace,
            )
        return self._list(
            "PersistentVolumeClaim",
            None,
            self.core.list_persistent_volume_claim_for_all_namespaces,
        )

    # ----------------------------
    # Single-object reads
    # ----------------------------

    def get_service_account(self, namespace: str, name: str) -> dict[str, Any]:
        return self._get(
            "ServiceAccount",
            namespace,
            name,
            self.core.read_namespaced_service_account,
        )

    def get_pvc(self, namespace: str, name: str) -> dict[str, Any]:
        return self._get(
            "PersistentVolumeClaim",
            namespace,
            name,
            self.core.read_namespaced_persistent_volume_claim,
        )

    def _list(self, kind, namespace, call, **kwargs) -> list[dict[str, Any]]:
        try:
            result = call(**kwargs)
        except ApiException as exc:
            raise FetchError(
                kind, exc.reason or str(exc), namespace=namespace, status=exc.status
            ) from exc
        except (OSError, HTTPError) as exc:
            raise FetchError(kind, str(exc), namespace=namespace) from exc

        items = [_to_dict(self.api_client, item) for item in result.items or []]
        logger.debug(
            "listed %d %s(s) in %s", len(items), kind, namespace or "all namespaces"
        )
        return items

    def _get(self, kind, namespace, name, call) -> dict[str, Any]:
        logger.debug("fetching %s %s/%s", kind, namespace, name)
        try:
            obj = call(name=name, namespace=namespace)
        except ApiException as exc:
            raise FetchError(
                kind,
                exc.reason or str(exc),
                namespace=namespace,
                name=name,
                status=exc.status,
            ) from exc
        except (OSError, HTTPError) as exc:
            raise FetchError(kind, str(exc), namespace=namespace, name=name) from exc
        return _to_dict(self.api_client, obj)


def current_namespace(context: str | None = None, kubeconfig: str | None = None) -> str:
    """
    Namespace configured on the selected (or active) kubeconfig context.
    """
    try:
        contexts, active = config.list_kube_config_contexts(config_file=kubeconfig)
    except ConfigException as exc:
        raise ConfigError(f"failed to get current namespace: {exc}") from exc

    selected = active
    if context:
        selected = next((c for c in contexts or [] if c.get("name") == context), None)
        if selected is None:
            raise ConfigError(f"context {context!r} not found in kubeconfig")

    return ((selected or {}).get("context") or {}).get("namespace") or "default"


def load_client(
    *, context: str | None = None, kubeconfig: str | None = None
) -> ClusterClient:
    """
    Load kubeconfig (honouring KUBECONFIG) and build a ClusterClient.
    """
    try:
        api_client = config.new_client_from_config(
            config_file=kubeconfig, context=context
        )
    except (ConfigException, OSError) as exc:
        raise ConfigError(f"failed to load kubeconfig: {exc}") from exc

    return ClusterClient(client.CoreV1Api(api_client), api_client)
