from dataclasses import dataclass

STRUCTURED_FORMATS = ("json", "yaml")

SERVICE_ACCOUNT_MARKERS = (".sa", ".serviceAccount")
PVC_MARKERS = (".pvc", ".pvcs")


@dataclass(frozen=True)
class DependencyNeeds:
    needs_service_account: bool = False
    needs_pvc: bool = False


def plan(output_format: str) -> DependencyNeeds:
    """
    Decide which optional kinds must be bulk-listed for this output.

    Structured output needs the full graph. Any other format is scanned
    for the substrings that reach the ServiceAccount or PVC fields, so a
    projection that never mentions them costs no extra list calls.

    This is a text heuristic, not a dependency graph: it over-triggers on
    paths such as .pod.spec.serviceAccountName and cannot see a reference
    that avoids the marker substrings.
    """
    if output_format in STRUCTURED_FORMATS:
        return DependencyNeeds(needs_service_account=True, needs_pvc=True)

    return DependencyNeeds(
        needs_service_account=any(m in output_format for m in SERVICE_ACCOUNT_MARKERS),
        needs_pvc=any(m in output_format for m in PVC_MARKERS),
    )
