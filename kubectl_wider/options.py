import logging
from dataclasses import dataclass, field

from kubectl_wider.client import ClusterClient, current_namespace, load_client
from kubectl_wider.correlator import correlate
from kubectl_wider.index import EMPTY_INDEX, index_by_name, index_by_namespaced_name
from kubectl_wider.output import render, validate_output_format
from kubectl_wider.planner import plan

logger = logging.getLogger(__name__)


@dataclass
class Options:
    context: str = ""
    namespace: str = ""
    output_format: str = ""
    label_selector: str = ""
    all_namespaces: bool = False
    kubeconfig: str | None = None
    client: ClusterClient | None = field(default=None, repr=False)

    def complete(self) -> None:
        """
        Build the cluster client and fill in the namespace from the
        kubeconfig context when none was given.
        """
        if self.client is None:
            self.client = load_client(
                context=self.context or None, kubeconfig=self.kubeconfig
            )

        if not self.namespace and not self.all_namespaces:
            self.namespace = current_namespace(
                context=self.context or None, kubeconfig=self.kubeconfig
            )

    def validate(self) -> None:
        validate_output_format(self.output_format)

    def run(self) -> str:
        if self.client is None:
            raise RuntimeError("Options.complete() must run before Options.run()")

        ns = None if self.all_namespaces else self.namespace
        needs = plan(self.output_format)
        logger.debug(
            "namespace=%s service_accounts=%s pvcs=%s",
            ns or "<all>",
            needs.needs_service_account,
            needs.needs_pvc,
        )

        pods = self.client.list_pods(ns, self.label_selector)
        node_index = index_by_name(self.client.list_nodes())

        pvc_index = EMPTY_INDEX
        if needs.needs_pvc:
            pvc_index = index_by_namespaced_name(self.client.list_pvcs(ns))

        sa_index = EMPTY_INDEX
        if needs.needs_service_account:
            sa_index = index_by_namespaced_name(self.client.list_service_accounts(ns))

        records = correlate(
            pods,
            node_index,
            sa_index,
            pvc_index,
            fetcher=self.client,
            needs=needs,
        )
        return render(records, self.output_format, all_namespaces=self.all_namespaces)
