"""Command line for listing the blueprint catalog."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence

import requests

from bptools.github import (
    GCP_ORG,
    TF_MODULES_ORG,
    GitHubService,
    SortOption,
    fetch_sorted_tf_repos,
)
from bptools.render import RenderFormat, render

log = logging.getLogger("bptools.catalog")

_TRUE_VALUES = {"1", "t", "T", "true", "TRUE", "True"}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser of the catalog command."""
    parser = argparse.ArgumentParser(
        prog="catalog",
        description="Blueprint catalog is used to get information about blueprints catalog.",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    list_parser = commands.add_parser(
        "list", help="lists blueprints", description="Lists blueprints in catalog"
    )
    formats = [member.value for member in RenderFormat]
    sorts = [member.value for member in SortOption]
    list_parser.add_argument(
        "--format",
        choices=formats,
        default=None,
        help=f"Format to display catalog. Defaults to table. Options are {formats}.",
    )
    list_parser.add_argument(
        "--sort",
        choices=sorts,
        default=None,
        help=f"Sort results. Defaults to created date. Options are {sorts}.",
    )
    list_parser.add_argument(
        "--verbose", action="store_true", help="Include repository descriptions."
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the catalog command and return its exit status."""
    args = build_parser().parse_args(argv)
    render_format = RenderFormat.parse(args.format) if args.format else RenderFormat.TABLE
    sort_option = SortOption.parse(args.sort) if args.sort else SortOption.CREATED
    verbose = args.verbose or os.environ.get("VERBOSE", "") in _TRUE_VALUES

    try:
        service = GitHubService.from_environment([TF_MODULES_ORG, GCP_ORG])
    except RuntimeError as exc:
        log.critical("%s", exc)
        return 1

    try:
        repos = fetch_sorted_tf_repos(service, sort_option)
    except (requests.RequestException, ValueError) as exc:
        print(f"Error: error fetching repos: {exc}", file=sys.stderr)
        return 1
    render(repos, sys.stdout, render_format, verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())