"""Command line interface for xmldoc-md."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from xmldoc_md.codegen_markdown import generate_docs
from xmldoc_md.config import load_config
from xmldoc_md.docindex import load_documentation
from xmldoc_md.errors import UsageError, XmlDocError
from xmldoc_md.metadata import YamlMetadataProvider

HELP_FLAGS = frozenset({"--help", "-h", "/h", "-?", "/?", "--version"})

USAGE = """\
Usage: xmldoc-md [--config PATH] [-v] <documentation.xml> <metadata.yml> <output.md>
This will take the XML documentation file and the matching type metadata
and transform the included documentation into human-readable Markdown.
All documentation will be written to <output.md>."""


def _version() -> str:
    try:
        return version("xmldoc-md")
    except PackageNotFoundError:
        return "unknown"


def print_usage(error: str | None = None) -> None:
    """Print the usage banner, preceded by *error* when given."""
    print(f"xmldoc-md v{_version()}")
    if error:
        print(f"Error: {error}")
    print(USAGE)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(prog="xmldoc-md", add_help=False)
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("paths", nargs="*")
    return parser


def _check_paths(paths: list[str]) -> tuple[str, str, str]:
    if len(paths) < 3:
        raise UsageError("Too few arguments")
    if len(paths) > 3:
        raise UsageError("Too many arguments")
    return paths[0], paths[1], paths[2]


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    arguments = list(sys.argv[1:] if argv is None else argv)
    if arguments and arguments[0] in HELP_FLAGS:
        print_usage()
        return 0

    args, unknown = build_parser().parse_known_args(arguments)
    try:
        if unknown:
            raise UsageError(f"unrecognized arguments: {' '.join(unknown)}")
        doc_file, metadata_file, output_file = _check_paths(args.paths)
    except UsageError as err:
        print_usage(str(err))
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    doc_path = Path(doc_file).resolve()
    metadata_path = Path(metadata_file).resolve()
    output_path = Path(output_file).resolve()

    print(f"Writing documentation to {output_file}")
    try:
        config = load_config(args.config)
        index = load_documentation(doc_path, config)
        generate_docs(index, YamlMetadataProvider(metadata_path), output_path, config)
    except (XmlDocError, ValueError, OSError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print("Done.")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
