class WiderError(Exception):
    """Base class for every failure that aborts a kubectl-wider run."""


class ConfigError(WiderError):
    """Kubeconfig could not be loaded or the API client not constructed."""


class UnsupportedOutputFormatError(WiderError, ValueError):
    pass


class ColumnSpecError(WiderError, ValueError):
    pass


class FetchError(WiderError):
    """
    A list or get call against the cluster failed.

    Fatal when raised by a bulk list; callers doing per-record
    enrichment catch it and leave the field empty.
    """

    def __init__(
        self,
        kind: str,
        reason: str,
        *,
        namespace: str | None = None,
        name: str | None = None,
        status: int | None = None,
    ):
        self.kind = kind
        self.namespace = namespace
        self.name = name
        self.status = status
        self.reason = reason

        if name:
            target = f"{kind} {namespace}/{name}" if namespace else f"{kind} {name}"
            verb = "get"
        else:
            target = f"{kind}s in namespace {namespace}" if namespace else f"{kind}s"
            verb = "list"
        super().__init__(f"failed to {verb} {target}: {reason}")
