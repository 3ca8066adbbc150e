#!/usr/bin/env python
"""
PnP mentions service entry point
Primes since_id, starts the poll/snapshot scheduler and serves the HTTP API
"""
import os
import sys
import logging
import argparse

from config import ConfigurationError, SINK_SUPABASE, load_config
from mention_scanner.api import create_app
from mention_scanner.logging_ext import setup_logging
from mention_scanner.scheduler import MentionScheduler
from mention_scanner.service import create_service
from utils.database import SupabaseManager

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='PnP Mentions Service')
    parser.add_argument('--port', type=int, help='HTTP port (default: PORT env or 3000)')
    parser.add_argument('--no-scheduler', action='store_true', help='Serve HTTP only, no poll/snapshot jobs')
    args = parser.parse_args()

    setup_logging(log_file=os.getenv('LOG_FILE'))

    try:
        config = load_config()

        db = None
        if config.sink == SINK_SUPABASE:
            config.validate_supabase()
            db = SupabaseManager(config.supabase_url, config.supabase_key)

        service = create_service(config, db)
        service.startup()
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        sys.exit(1)

    scheduler = None
    if not args.no_scheduler:
        scheduler = MentionScheduler(service, poll_interval_seconds=config.poll_interval_seconds)
        scheduler.start()

    port = args.port or config.port
    app = create_app(service, db)
    logger.info(f"🌐 Serving mentions API on http://0.0.0.0:{port}")
    try:
        app.run(host='0.0.0.0', port=port, debug=False)
    except KeyboardInterrupt:
        logger.info("🛑 Received interrupt signal")
    finally:
        if scheduler:
            scheduler.stop()


if __name__ == "__main__":
    main()
