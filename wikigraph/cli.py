#!/usr/bin/env python
"""
Command line interface for building and inspecting the wiki graph.

Usage:
    wikigraph build <pages_dir> [--bundle examples.zip] [--workers 4]
    wikigraph missing <pages_dir>
    wikigraph sitemap <pages_dir> --base-url http://example.org
    wikigraph tree <pages_dir>
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .builder import BuildReport, WikiBuilder
from .config import WikiConfig
from .sources import PageSourceRepository


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wikigraph",
        description="Build and inspect the content graph of a Markdown wiki",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "pages_dir",
        type=Path,
        help="Directory containing the .md page files"
    )
    common.add_argument(
        "-c", "--config",
        type=Path,
        help="JSON configuration file (see WikiConfig)"
    )
    common.add_argument(
        "--bundle",
        type=Path,
        help="ZIP bundle with example sources for include: blocks"
    )
    common.add_argument(
        "--workers",
        type=int,
        help="Number of threads used to process pages"
    )
    common.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress bars and info logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser(
        "build",
        parents=[common],
        help="Build the graph and print summary counts",
    )
    subparsers.add_parser(
        "missing",
        parents=[common],
        help="List links pointing to pages that do not exist",
    )
    sitemap_parser = subparsers.add_parser(
        "sitemap",
        parents=[common],
        help="Print absolute URLs of all pages",
    )
    sitemap_parser.add_argument(
        "--base-url",
        help="Public site URL (overrides the configured one)"
    )
    subparsers.add_parser(
        "tree",
        parents=[common],
        help="Print the page hierarchy",
    )

    return parser


def load_config(args: argparse.Namespace) -> WikiConfig:
    config = WikiConfig.load(args.config) if args.config else WikiConfig()
    config.pages_dir = args.pages_dir
    if args.bundle is not None:
        config.bundle_path = args.bundle
    if args.workers is not None:
        config.workers = args.workers
    if args.quiet:
        config.show_progress = False
    # re-run validation on the overridden values
    return WikiConfig.from_dict(config.to_dict())


def run_build(config: WikiConfig) -> BuildReport:
    repository = PageSourceRepository.from_directory(config.pages_dir)
    builder = WikiBuilder(
        repository,
        pipeline=config.get_pipeline(),
        index_page_id=config.index_page_id,
        workers=config.workers,
        show_progress=config.show_progress,
    )
    return builder.build()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Configure logging
    log_level = logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(levelname)s: %(message)s'
    )

    if not args.pages_dir.is_dir():
        logging.error(f"Pages directory does not exist: {args.pages_dir}")
        return 1

    try:
        config = load_config(args)
        report = run_build(config)
    except Exception as e:
        logging.error(f"Wiki build failed: {e}", exc_info=True)
        return 1

    queries = report.queries

    if args.command == "build":
        for name, count in report.context.stats().items():
            print(f"{name}: {count}")
        for result in report.failed:
            print(f"FAILED {result.page_id}: {result.error.cause}")
        return 1 if report.failed else 0

    if args.command == "missing":
        for missing in queries.missing_pages_report():
            print(f"{missing.source_page_id} -> {missing.missing_page_id}")
        return 0

    if args.command == "sitemap":
        for url in queries.sitemap_urls(args.base_url or config.base_url):
            print(url)
        return 0

    if args.command == "tree":
        for line in queries.tree_lines():
            print(line)
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
