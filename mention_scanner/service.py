#!/usr/bin/env python3
"""
Mentions service for PnP Mention Scanner
Startup priming, on-demand 7-day backfill, realtime poll and hourly snapshot
"""
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from config import Config
from utils.database import SupabaseManager

from .logging_ext import best_effort, truncate_text
from .models import Mention, isoformat_z, utc_now_iso
from .scanner import MentionSearcher
from .sinks import MentionSink, create_sink
from .watermark import Watermark
from .x_client import XSearchClient

logger = logging.getLogger(__name__)

BACKFILL_WINDOW = timedelta(days=7)


def build_output(mentions: List[Mention], target_account: str,
                 start_date: Optional[datetime], end_date: Optional[datetime],
                 last_7_days: bool = True) -> Dict[str, Any]:
    """Output document: metadata plus tweets"""
    return {
        'metadata': {
            'count': len(mentions),
            'generated_at': utc_now_iso(),
            'query_parameters': {
                'target_account': target_account,
                'start_date': isoformat_z(start_date) if start_date else None,
                'end_date': isoformat_z(end_date) if end_date else None,
                'last_7_days': last_7_days,
            },
        },
        'tweets': [m.to_dict() for m in mentions],
    }


class MentionsService:
    """Drives searches and persistence for one target account"""

    def __init__(self, config: Config, searcher: MentionSearcher, sink: MentionSink,
                 watermark: Optional[Watermark] = None):
        self.config = config
        self.searcher = searcher
        self.sink = sink
        self.watermark = watermark or Watermark()
        # Poll, snapshot and HTTP-triggered saves share the watermark and the sink
        self._lock = threading.RLock()

    @property
    def target_account(self) -> str:
        return self.config.target_account

    def startup(self) -> Optional[str]:
        """
        Validate credentials and prime since_id with the latest mention.

        A missing credential is fatal. A failed prime only logs a warning;
        the first poll then runs without since_id.
        """
        self.config.validate_credentials()

        latest = self.watermark.prime(self.searcher.client, self.target_account)
        if latest:
            logger.info(f"Primed since_id with latest mention id={latest}")
        else:
            logger.warning('Unable to prime since_id; first poll will start without a lower bound')
        return latest

    def fetch_recent_mentions(self, save: bool = False) -> Dict[str, Any]:
        """Search the last 7 days; when save is set, persist the result as a snapshot"""
        self.config.validate_credentials()

        account = self.target_account
        end_date = datetime.now(timezone.utc)
        start_date = end_date - BACKFILL_WINDOW
        logger.info(f"Fetching mentions for @{account} from {isoformat_z(start_date)} to {isoformat_z(end_date)}")

        result = self.searcher.search(account, start_date=start_date, end_date=end_date)
        output = build_output(result.tweets, account, start_date, end_date, last_7_days=True)

        if save:
            with self._lock:
                self.sink.save_snapshot(output, result.tweets)
        return output

    @best_effort('Polling mentions')
    def poll_new_mentions(self):
        """Fetch mentions newer than since_id and append them oldest-first"""
        if not self.config.poll_enabled:
            return

        if not self._lock.acquire(blocking=False):
            logger.debug('Previous mentions job still running; skipping poll')
            return
        try:
            account = self.target_account
            result = self.searcher.search(account, since_id=self.watermark.current)

            if result.tweets:
                chronological = list(reversed(result.tweets))
                for t in chronological:
                    logger.info(f"@{account} mentioned by user {t.author_id} at {t.created_at}: {truncate_text(t.text or '')}")
                self.sink.append(chronological, target_account=account, last_7_days=False)

            # Advance past everything seen, qualifying or not
            self.watermark.advance(result.max_seen_id)
        finally:
            self._lock.release()

    @best_effort('Cron mentions fetch', level=logging.ERROR)
    def cron_index_mentions(self):
        """Hourly 7-day snapshot"""
        if not self.config.cron_enabled:
            return
        self.fetch_recent_mentions(save=True)
        logger.info('Cron mentions fetch completed')


def create_service(config: Config, db: Optional[SupabaseManager] = None) -> MentionsService:
    """Wire client, searcher and sink from configuration; raises on missing credentials"""
    config.validate_credentials()
    client = XSearchClient(config.twitter_bearer_token)
    searcher = MentionSearcher(client, max_pages=config.max_pages)
    return MentionsService(config, searcher, create_sink(config, db))
