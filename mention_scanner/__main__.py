#!/usr/bin/env python3
"""
Module entry point for mention_scanner
Enables: python -m mention_scanner --backfill [--save] | --poll-once
"""
import sys
import json
import logging
import argparse

from config import ConfigurationError, load_config

from .logging_ext import setup_logging
from .service import create_service

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='PnP Mention Scanner (one-shot)')
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--backfill', action='store_true', help='Fetch mentions from the last 7 days and print them')
    group.add_argument('--poll-once', action='store_true', help='Prime since_id, then run a single poll cycle')
    parser.add_argument('--save', action='store_true', help='With --backfill, persist the snapshot')
    parser.add_argument('--debug', action='store_true', help='Verbose logging')
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    try:
        config = load_config()
        service = create_service(config)
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 1

    if args.backfill:
        output = service.fetch_recent_mentions(save=args.save)
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        service.startup()
        service.poll_new_mentions()
        print(json.dumps({'since_id': service.watermark.current}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
