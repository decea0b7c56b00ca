"""Main entry point for pycity."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pycity.errors import PycityError
from pycity.layout.config import LayoutConfig
from pycity.layout.engine import LayoutEngine
from pycity.model.node import TreeNode

logger = logging.getLogger("pycity")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list (uses sys.argv if None)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="pycity",
        description="Code city layout - turn a repository tree into 3D boxes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "tree",
        help="JSON file describing the repository tree ('-' reads stdin)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write the layout to PATH instead of stdout",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=50,
        metavar="N",
        help="Number of simulation steps (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        metavar="N",
        help="Random seed for jitter and tie-breaks (default: 0)",
    )
    parser.add_argument(
        "--unseeded",
        action="store_true",
        help="Use an unseeded random generator (output differs between runs)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        metavar="N",
        help="Indent the JSON output by N spaces",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log simulation details to stderr",
    )
    return parser.parse_args(argv)


def load_tree(source: str) -> TreeNode | None:
    """Load a tree from a JSON file or stdin.

    Args:
        source: File path, or '-' for stdin

    Returns:
        Root node, or None for an empty document
    """
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(source, encoding="utf-8") as f:
            data = json.load(f)

    if not data:
        return None
    return TreeNode.from_dict(data)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = LayoutConfig(
            iterations=args.iterations,
            seed=None if args.unseeded else args.seed,
        )
        root = load_tree(args.tree)
        result = LayoutEngine(config).calculate_layout(root)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError, PycityError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    text = json.dumps(result.to_dicts(), indent=args.indent)
    if args.output is None:
        print(text)
    else:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {result.node_count} nodes to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
