import json
from typing import Any

# ----------------------------
# Parsing utilities
# ----------------------------


def load_json(path: str) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def get_name(obj: dict[str, Any] | None) -> str:
    return ((obj or {}).get("metadata") or {}).get("name", "")


def get_namespace(obj: dict[str, Any] | None) -> str:
    return ((obj or {}).get("metadata") or {}).get("namespace", "")


def namespaced_key(namespace: str, name: str) -> str:
    return f"{namespace}/{name}"


def get_pod_phase(pod: dict[str, Any]) -> str:
    return (pod.get("status") or {}).get("phase", "Unknown")


def get_pod_node_name(pod: dict[str, Any]) -> str:
    return (pod.get("spec") or {}).get("nodeName") or ""


def get_pod_service_account(pod: dict[str, Any]) -> str:
    spec = pod.get("spec") or {}
    # serviceAccount is the deprecated alias still set by older API servers
    return spec.get("serviceAccountName") or spec.get("serviceAccount") or ""


def get_pod_claim_names(pod: dict[str, Any]) -> list[str]:
    """
    Claim names referenced by the Pod's volumes, in declaration order.
    Volumes without a persistentVolumeClaim source are skipped.
    """
    claims = []
    for vol in (pod.get("spec") or {}).get("volumes") or []:
        source = vol.get("persistentVolumeClaim")
        if source and source.get("claimName"):
            claims.append(source["claimName"])
    return claims


def get_label(obj: dict[str, Any] | None, key: str) -> str:
    labels = ((obj or {}).get("metadata") or {}).get("labels") or {}
    return labels.get(key, "")


def node_ready_status(node: dict[str, Any]) -> str:
    for c in (node.get("status") or {}).get("conditions") or []:
        if c.get("type") == "Ready":
            return "Ready" if c.get("status") == "True" else "NotReady"
    return "Unknown"
