"""
Command-line entry point: ``ectd-generate``.

Exit codes: 0 success, 1 invalid configuration or failed build, 2 usage error.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import get_settings
from .core.config_loader import default_config, load_config, load_schema, read_config_file, validate_config
from .core.errors import ConfigurationInvalidError, EctdException, ValidationIssue
from .core.generator import generate_submission

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ectd-generate",
        description="eCTD 4.0 Submission Generator - generate eCTD 4.0 submission packages",
    )
    parser.add_argument("-i", "--input", help="Path to a JSON or YAML configuration file")
    parser.add_argument("-o", "--output", help="Output directory (default: ECTD_OUTPUT_DIR or ./output)")
    parser.add_argument("--no-samples", action="store_true", help="Skip generating placeholder PDF files")
    parser.add_argument("--default", action="store_true", help="Use the default sample configuration")
    parser.add_argument("--print-schema", action="store_true", help="Print the configuration JSON schema")
    parser.add_argument("--print-default", action="store_true", help="Print the default configuration")
    parser.add_argument("--validate-only", action="store_true", help="Validate the configuration and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _print_issues(issues: List[ValidationIssue]) -> None:
    print("Configuration validation failed:", file=sys.stderr)
    for issue in issues:
        print(f"  - {issue.location}: {issue.message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.print_schema:
        print(json.dumps(load_schema(), indent=2))
        return EXIT_OK
    if args.print_default:
        print(json.dumps(default_config(), indent=2))
        return EXIT_OK

    if args.default and args.input:
        parser.print_usage(sys.stderr)
        print("ectd-generate: error: --default and --input are mutually exclusive", file=sys.stderr)
        return EXIT_USAGE
    if not args.default and not args.input:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    try:
        if args.default:
            print("Using default sample configuration...")
            raw, source = default_config(), "default"
        else:
            print(f"Reading configuration from: {Path(args.input).resolve()}")
            raw, source = read_config_file(args.input), args.input

        if args.validate_only:
            issues = validate_config(raw)
            if issues:
                _print_issues(issues)
                return EXIT_FAILED
            print("Configuration is valid.")
            return EXIT_OK

        config = load_config(raw, source=source)
        settings = get_settings()
        output_dir = Path(args.output) if args.output else settings.output_path()

        print("Generating eCTD 4.0 submission package...")
        print(f"  Application: {config.application.type} {config.application.number}")
        print(f"  Submission: {config.submission.title} (Sequence {config.submission.sequenceNumber})")
        print(f"  Documents: {len(config.documents)}")
        print(f"  Output: {output_dir.resolve()}")

        result = generate_submission(config, output_dir, False if args.no_samples else None, settings)
    except ConfigurationInvalidError as exc:
        _print_issues(exc.issues)
        return EXIT_FAILED
    except EctdException as exc:
        print(f"Error [{exc.code.value}]: {exc}", file=sys.stderr)
        if exc.error_detail.details:
            print(f"  {exc.error_detail.details}", file=sys.stderr)
        return EXIT_FAILED

    print("Submission package generated successfully.")
    print(f"  Sequence directory: {result.sequenceDir}")
    print(f"  Manifest: {result.manifestPath}")
    print(f"  Digest manifest: {result.digestManifestPath}")
    print(f"  Content files: {result.generatedFiles}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
