#!/usr/bin/env python3
"""
Database Backup - CLI Entry Point
=================================
Dumps a MySQL database into a replayable SQL script, gzips it and uploads
it to S3.
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .database_dumper import DatabaseDumper
from .exceptions import ConfigurationError
from .pipeline import ArtifactPipeline
from .progress import ProgressReporter
from .storage import S3Storage
from .utils import print_dry_run_info, setup_logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Database Backup - dump a MySQL database and upload it to S3'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be dumped without connecting to the database'
    )
    parser.add_argument(
        '--no-upload',
        action='store_true',
        help='Write (and gzip) the dump locally without uploading it'
    )

    args = parser.parse_args()

    # Load configuration
    try:
        config = ConfigLoader(args.config)
        request = config.get_dump_request()
        storage_settings = config.get_storage_settings() if not args.no_upload else None
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.dry_run:
        log_settings = config.get_logging_settings()
        if args.verbose:
            log_settings['level'] = 'DEBUG'
        setup_logging(log_settings)
        logging.info("DRY RUN MODE - No data will be dumped")
        print_dry_run_info(request, storage_settings)
        sys.exit(0)

    # Progress lines own the console; logging goes to the log file
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings, console=False)

    reporter = ProgressReporter()
    if storage_settings is not None:
        pipeline = ArtifactPipeline(
            storage=S3Storage(storage_settings),
            bucket=storage_settings.bucket,
            reporter=reporter,
            key_prefix=storage_settings.key_prefix
        )
    else:
        pipeline = ArtifactPipeline(storage=None, bucket=None, reporter=reporter)

    result = DatabaseDumper(pipeline, reporter).run(request)

    if not result.success:
        sys.exit(1)

    reporter.report(
        f"Backup complete: {len(result.tables)} table(s), {result.total_rows} row(s)", 1, 1
    )


if __name__ == '__main__':
    main()
