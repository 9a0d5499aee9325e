"""Main CLI entry point for the simple-xml command-line tool.

Provides re-serialization, well-formedness checking and outline printing of
XML documents read through the DOM.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from simple_xml_dom import __version__
from simple_xml_dom.api import XMLDomParser
from simple_xml_dom.shared import ConfigError, DomConfig
from simple_xml_dom.shared.logging import get_logger

MAX_ERRORS_SHOWN = 3


def load_config(args: argparse.Namespace) -> DomConfig:
    """Build the DOM configuration from ``--config``, presets and overrides."""
    config = DomConfig.default()
    config_path = getattr(args, "config", None)
    if config_path is not None:
        config = DomConfig.from_file(config_path)
    if getattr(args, "strict", False):
        config = config.override(
            skip_declarations=False, mismatched_close="error", max_depth=DomConfig.strict().max_depth
        )
    indent_spaces = getattr(args, "indent_spaces", None)
    if indent_spaces is not None:
        config = config.override(indent=" " * indent_spaces)
    if getattr(args, "trailing_newline", False):
        config = config.override(trailing_newline=True)
    return config


def check_file(parser: XMLDomParser, path: Path) -> Dict[str, Any]:
    """Parse one file and summarize the outcome."""
    result = parser.open(path)
    return {
        "file": str(path),
        "success": result.success,
        "root": result.root.name if result.root is not None else None,
        "element_count": result.element_count,
        "processing_time_ms": result.performance.processing_time_ms,
        "diagnostics": [diag.to_dict() for diag in result.diagnostics],
    }


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    successful = sum(1 for r in results if r.get("success", False))
    lines = [f"Checked {len(results)} files, {successful} well-formed", "-" * 60]
    for result in results:
        status = "OK  " if result.get("success", False) else "FAIL"
        lines.append(f"{status} {result['file']}")
        if result.get("success", False):
            lines.append(
                f"     root <{result['root']}>, {result['element_count']} elements, "
                f"{result.get('processing_time_ms', 0):.1f}ms"
            )

        diagnostics = result.get("diagnostics", [])
        for diag in diagnostics[:MAX_ERRORS_SHOWN]:
            location = f"line {diag['line']}: " if "line" in diag else ""
            lines.append(f"     {diag['severity']}: {location}{diag['message']}")
        if len(diagnostics) > MAX_ERRORS_SHOWN:
            lines.append(f"     ... and {len(diagnostics) - MAX_ERRORS_SHOWN} more")
    return "\n".join(lines)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="simple-xml",
        description="Read, check and re-serialize small XML documents",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only report errors")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    format_parser = subparsers.add_parser("format", help="Re-serialize an XML document")
    format_parser.add_argument("path", type=Path, help="XML file to format")
    format_parser.add_argument(
        "--output", "-o", type=Path, help="Output file (default: stdout)"
    )
    format_parser.add_argument(
        "--indent-spaces", type=int, help="Indent with N spaces instead of tabs"
    )
    format_parser.add_argument(
        "--trailing-newline", action="store_true", help="End the output with a newline"
    )
    format_parser.add_argument("--config", "-c", type=Path, help="Configuration file path")

    check_parser = subparsers.add_parser("check", help="Check XML files parse cleanly")
    check_parser.add_argument("paths", nargs="+", type=Path, help="XML files to check")
    check_parser.add_argument(
        "--format", "-f", choices=["json", "text"], default="text", help="Output format"
    )
    check_parser.add_argument(
        "--strict", action="store_true",
        help="Reject declarations, mismatched close tags and very deep nesting",
    )
    check_parser.add_argument("--config", "-c", type=Path, help="Configuration file path")

    tree_parser = subparsers.add_parser("tree", help="Print the element outline")
    tree_parser.add_argument("path", type=Path, help="XML file to outline")
    tree_parser.add_argument("--config", "-c", type=Path, help="Configuration file path")

    return parser


def cmd_format(args: argparse.Namespace) -> int:
    """Handle format command."""
    parser = XMLDomParser(load_config(args))
    result = parser.open(args.path)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    if args.output:
        saved = parser.save(result.root, args.output)
        if not saved.success:
            print(f"Error: {saved.error}", file=sys.stderr)
            return 1
        print(f"Formatted {args.path} -> {args.output}", file=sys.stderr)
    else:
        print(parser.render(result.root), end="" if parser.config.trailing_newline else "\n")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    parser = XMLDomParser(load_config(args))
    results = [check_file(parser, path) for path in args.paths]
    print(format_results(results, args.format))
    return 0 if all(r["success"] for r in results) else 1


def cmd_tree(args: argparse.Namespace) -> int:
    """Handle tree command."""
    parser = XMLDomParser(load_config(args))
    result = parser.open(args.path)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    for node in result.root.iter():
        attribute_note = f" ({len(node.attributes)} attributes)" if node.attributes else ""
        print(f"{'  ' * node.depth}{node.name}{attribute_note}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    logger = get_logger(__name__, None, "cli")
    handlers = {"format": cmd_format, "check": cmd_check, "tree": cmd_tree}
    try:
        return handlers[args.command](args)
    except ConfigError as e:
        logger.error("Invalid configuration", extra={"error": str(e)})
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
