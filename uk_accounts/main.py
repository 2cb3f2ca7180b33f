#!/usr/bin/env python3
# Path: uk_accounts/main.py
"""
UK Accounts - Main Entry Point

Extracts financial facts from Companies House bulk accounts archives.

Data Flow:
    INPUT:   <directory>/*.zip (or <directory>/<worker>/*.zip with --workers)
    PROCESS: iXBRL / XBRL parsing, catalogue extraction, filtering
    OUTPUT:  <output>/accounts[_<worker>]_<timestamp>.<csv|json>

Usage:
    uk-accounts /data/accounts
    uk-accounts /data/accounts --workers 12 --format json
    uk-accounts /data/accounts --tags core:DividendsPaid --start 2017-12-31 --end 2019-01-01
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .config_loader import ConfigLoader
from .catalogue import parse_tag_list
from .constants import MENU_HEADER, STATUS_OK, STATUS_FAIL, STATUS_INFO
from .core.logger import setup_ipo_logging, get_process_logger
from .output.sinks import SinkRegistry
from .batch.archive_processor import BatchJob, BatchStatistics, run_job, run_workers


def print_banner() -> None:
    """Print application banner."""
    print()
    print(MENU_HEADER)
    print("  UK Accounts - Companies House XBRL extraction")
    print(MENU_HEADER)
    print()


def print_statistics(stats: BatchStatistics) -> None:
    """
    Print run summary.

    Args:
        stats: Merged batch statistics
    """
    print(f"\n{STATUS_OK} Archives: {stats.archives_processed} processed, "
          f"{stats.archives_failed} unreadable")
    print(f"  Documents: {stats.documents_parsed} parsed, {stats.documents_failed} failed, "
          f"{stats.documents_skipped} skipped, {stats.documents_unsupported} unsupported")
    print(f"  Records:   {stats.records_emitted}")

    if stats.diagnostics:
        print(f"\n{STATUS_INFO} Diagnostics:")
        for name, count in sorted(stats.diagnostics.items()):
            print(f"  {name:<20} {count:>8}")
    print()


def build_parser(config: ConfigLoader) -> argparse.ArgumentParser:
    """
    Build command line parser with configured defaults.

    Args:
        config: Configuration loader

    Returns:
        ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='uk-accounts',
        description='Extract accounts from Companies House bulk iXBRL/XBRL archives',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uk-accounts /data/accounts                     All archives, CSV output
  uk-accounts /data/accounts --workers 12        Workers read /data/accounts/1 .. /12
  uk-accounts /data/accounts --zip-pattern 2023  Only archives with 2023 in the name
  uk-accounts /data/accounts --tags "core:DividendsPaid,bus:NameEntityOfficer#text"
        """
    )

    parser.add_argument(
        'directory',
        type=Path,
        help='Directory holding *.zip archives'
    )

    parser.add_argument(
        '--file-pattern',
        type=str,
        help='Only process archive entries whose name matches this regex'
    )

    parser.add_argument(
        '--zip-pattern',
        type=str,
        help='Only process archives whose name matches this regex'
    )

    parser.add_argument(
        '--format', '-f',
        choices=SinkRegistry.get_available(),
        default=config.get('output_format', 'csv'),
        help='Output format (default: %(default)s)'
    )

    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=config.get('output_dir'),
        help='Output directory (default: %(default)s)'
    )

    parser.add_argument(
        '--workers', '-w',
        type=int,
        default=config.get('workers', 1),
        help='Worker processes; more than one reads numbered subdirectories'
    )

    parser.add_argument(
        '--tags',
        type=str,
        help='Comma-separated catalogue, alias:LocalName[#text] (default: built-in)'
    )

    parser.add_argument(
        '--start',
        type=str,
        help='Keep records whose end date is after this date (exclusive)'
    )

    parser.add_argument(
        '--end',
        type=str,
        help='Keep records whose end date is before this date (exclusive)'
    )

    parser.add_argument(
        '--instant',
        action='store_true',
        help='Compare the instant date instead of the end date'
    )

    parser.add_argument(
        '--ignore-sign',
        action='store_true',
        help='Report absolute values'
    )

    parser.add_argument(
        '--dedupe',
        action='store_true',
        help='Keep only the first record per company, account and context'
    )

    parser.add_argument(
        '--registry',
        type=Path,
        default=config.get('company_registry_path'),
        help='Companies House basic company data CSV for enrichment'
    )

    parser.add_argument(
        '--log-dir',
        type=Path,
        default=config.get('log_dir'),
        help='Directory for IPO log files (default: console only)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress banner and summary'
    )

    return parser


def build_job(args: argparse.Namespace, config: ConfigLoader) -> BatchJob:
    """
    Batch job from parsed arguments.

    Raises:
        ValueError: On malformed catalogue entries
    """
    tags = []
    if args.tags:
        tags = [entry.strip() for entry in args.tags.split(',') if entry.strip()]
        parse_tag_list(tags)

    return BatchJob(
        directory=args.directory,
        output_dir=args.output,
        format_name=args.format,
        file_pattern=args.file_pattern,
        zip_pattern=args.zip_pattern,
        tags=tags,
        window_start=args.start,
        window_end=args.end,
        compare_instant=args.instant,
        ignore_sign=args.ignore_sign,
        dedupe=args.dedupe,
        registry_path=args.registry,
        log_dir=args.log_dir,
        log_level=config.get('log_level', 'INFO'),
    )


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for uk-accounts.

    Args:
        argv: Arguments (sys.argv[1:] if None)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    config = ConfigLoader()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    if (args.start is None) != (args.end is None):
        parser.error('--start and --end must be given together')
    if args.workers < 1:
        parser.error('--workers must be at least 1')

    setup_ipo_logging(
        log_dir=args.log_dir,
        log_level=config.get('log_level', 'INFO'),
        console_output=config.get('log_console', True)
    )
    logger = get_process_logger('main')

    if not args.quiet:
        print_banner()

    if not args.directory.is_dir():
        print(f"{STATUS_FAIL} Directory not found: {args.directory}")
        logger.error(f"Directory not found: {args.directory}")
        return 1

    try:
        job = build_job(args, config)
        logger.info(f"Starting run over {args.directory} with {args.workers} worker(s)")

        if args.workers == 1:
            stats = run_job(job, config=config)
        else:
            stats = run_workers(job, args.workers)

    except ValueError as e:
        print(f"\n{STATUS_FAIL} Error: {e}")
        logger.error(f"Configuration error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n[Interrupted]")
        return 130

    logger.info(f"Run finished: {stats.to_dict()}")
    if not args.quiet:
        print_statistics(stats)

    return 0


if __name__ == '__main__':
    sys.exit(main())
