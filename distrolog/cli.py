# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for distrolog.

Commands:

    versions: Print the component versions of a release
    changelog: Print component versions and correlated pull requests

Example:
    Component versions of an RKE2 release:
        ```bash
        $ distrolog versions rke2 v1.27.3+rke2r1
        ```

    Changelog data as JSON:
        ```bash
        $ distrolog changelog k3s v1.27.2+k3s1 v1.27.3+k3s1 --output json
        ```

    Enable verbose output:
        ```bash
        $ distrolog versions k3s v1.27.3+k3s1 --verbose
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration, network, or unknown product)

Note:
    A component whose artifact cannot be read is printed as N/A; it does
    not change the exit code. Verbose mode prints the reason and full
    tracebacks on errors.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
import json
from pathlib import Path
import sys

from distrolog.changelog.models import Component
from distrolog.config import load_config
from distrolog.core import generate_changelog, resolve_versions
from distrolog.exceptions import DistrologError
from distrolog.logging import get_logger, set_global_logger


def _print_components(components: list[Component], errors: dict[str, str]) -> None:
    width = max((len(c.name) for c in components), default=0) + 2
    for component in components:
        value = component.link or "N/A"
        print(f"{component.name + ':':<{width}} {value}")
    if errors:
        print()
        print(f"Unavailable ({len(errors)}):")
        for name, message in errors.items():
            print(f"  [X] {name}: {message}")


def _report_error(err: Exception, args: argparse.Namespace) -> int:
    print(f"Error: {err}")
    if args.verbose or args.debug:
        import traceback

        traceback.print_exc()
    return 1


def cmd_versions(args: argparse.Namespace) -> int:
    """Handler for 'distrolog versions' command.

    Args:
        args: Parsed command-line arguments containing product, version,
            output format, config path and flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        config = load_config(args.config)
        result = resolve_versions(args.product, args.version, config=config)
    except DistrologError as err:
        return _report_error(err, args)

    if args.output == "json":
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print("=" * 70)
    print(f"COMPONENT VERSIONS: {result.product} {result.version}")
    print("=" * 70)
    _print_components(result.components, result.errors)
    print("=" * 70)
    return 0


def cmd_changelog(args: argparse.Namespace) -> int:
    """Handler for 'distrolog changelog' command.

    Args:
        args: Parsed command-line arguments containing product, both
            milestones, output format, config path and flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    Note:
        Makes one GitHub API request per commit in the range. Set
        GITHUB_TOKEN to avoid the unauthenticated rate limit.

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        config = load_config(args.config)
        result = generate_changelog(
            args.product, args.previous, args.milestone, config=config
        )
    except DistrologError as err:
        return _report_error(err, args)

    if args.output == "json":
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print("=" * 70)
    print(f"CHANGELOG: {result.product} {result.previous_milestone}...{result.milestone}")
    print("=" * 70)
    print(f"Commits:  {result.commit_count}")
    print(f"Issues:   {len(result.issues)}")
    print()
    print("Components:")
    _print_components(result.components, result.errors)
    print()
    print("Changes:")
    for issue in result.issues:
        print(f"  * {issue.title} (#{issue.number})")
        for line in issue.note.splitlines():
            print(f"      {line}")
    print("=" * 70)
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file overriding the built-in defaults",
    )
    parser.add_argument(
        "--output",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def _package_version() -> str:
    try:
        return version("distrolog")
    except PackageNotFoundError:
        from distrolog import __version__

        return __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the distrolog CLI."""
    parser = argparse.ArgumentParser(
        prog="distrolog",
        description="distrolog - component versions and changelogs for k3s and RKE2 releases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"distrolog {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'versions' command
    parser_versions = subparsers.add_parser(
        "versions",
        help="Print the component versions of a release",
        description="Fetch the build artifacts of a release and print every component version.",
    )
    parser_versions.add_argument("product", help="Product line (k3s or rke2)")
    parser_versions.add_argument("version", help="Release tag (e.g., v1.27.3+k3s1)")
    _add_common_arguments(parser_versions)
    parser_versions.set_defaults(func=cmd_versions)

    # 'changelog' command
    parser_changelog = subparsers.add_parser(
        "changelog",
        help="Print component versions and pull requests of a release",
        description="Compare two milestones and correlate their commits with pull requests.",
    )
    parser_changelog.add_argument("product", help="Product line (k3s or rke2)")
    parser_changelog.add_argument("previous", help="Tag of the previous release")
    parser_changelog.add_argument("milestone", help="Tag of the release to describe")
    _add_common_arguments(parser_changelog)
    parser_changelog.set_defaults(func=cmd_changelog)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the distrolog CLI.

    This function is registered as the 'distrolog' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
