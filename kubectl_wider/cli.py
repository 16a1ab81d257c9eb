import argparse
import logging
import sys

from kubectl_wider.errors import WiderError
from kubectl_wider.options import Options

EXAMPLES = r"""
Examples:
  # List pods with node info in current namespace
  kubectl wider

  # List pods in all namespaces
  kubectl wider -A

  # Label selector combined with a namespace
  kubectl wider -n default -l app=nginx

  # Custom columns; escape dots that belong to a label key
  kubectl wider -o custom-columns=NAME:.pod.metadata.name,NODE:.node.metadata.name,OS:.node.metadata.labels.kubernetes\.io/os

  # Structured output
  kubectl wider -o json
  kubectl wider -o yaml
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubectl-wider",
        description="Get pods extended with their node, service account and PVCs",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--context", default="", help="Context to query (defaults to current context)"
    )
    parser.add_argument(
        "-n",
        "--namespace",
        default="",
        help="Namespace to query (defaults to current context namespace)",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output_format",
        default="",
        help="Output format. One of: (json, yaml, custom-columns=NAME:PATH,...)",
    )
    parser.add_argument(
        "-A", "--all-namespaces", action="store_true", help="Query all namespaces"
    )
    parser.add_argument(
        "-l",
        "--selector",
        dest="label_selector",
        default="",
        help="Selector (label query) to filter on, e.g. -l key1=value1,key2=value2",
    )
    parser.add_argument("--kubeconfig", default=None, help="Path to kubeconfig file")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    opts = Options(
        context=args.context,
        namespace=args.namespace,
        output_format=args.output_format,
        label_selector=args.label_selector,
        all_namespaces=args.all_namespaces,
        kubeconfig=args.kubeconfig,
    )

    try:
        # format is checked before any kubeconfig or cluster access
        opts.validate()
        opts.complete()
        text = opts.run()
    except WiderError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
