#!/usr/bin/env python3
"""
Persistence sinks for PnP Mention Scanner
One interface, two backends: a JSON output document or the Supabase twitter_data table
"""
import logging
from typing import Any, Dict, List, Optional

from config import Config, SINK_SUPABASE
from utils.database import SupabaseManager
from utils.file_storage import FileStorage

from .models import Mention

logger = logging.getLogger(__name__)


def mention_row(mention: Mention) -> Dict[str, Any]:
    """Stored row: the full mention as JSON plus its market PDA as its own column"""
    return {
        'tweets_json': mention.to_dict(),
        'market_pda': mention.market_pda,
    }


class MentionSink:
    """Durably records batches of qualifying mentions"""

    def save_snapshot(self, output: Dict[str, Any], mentions: List[Mention]):
        """Record a full backfill result (metadata + tweets)"""
        raise NotImplementedError

    def append(self, mentions: List[Mention], target_account: Optional[str] = None,
               last_7_days: Optional[bool] = None):
        """Record newly polled mentions, in the order given"""
        raise NotImplementedError


class FileSink(MentionSink):
    """Writes to a single JSON output document"""

    def __init__(self, output_path: str, storage: Optional[FileStorage] = None):
        self.output_path = output_path
        self.storage = storage or FileStorage()

    def save_snapshot(self, output, mentions):
        return self.storage.save_json(self.output_path, output)

    def append(self, mentions, target_account=None, last_7_days=None):
        return self.storage.append_tweets(
            self.output_path,
            [m.to_dict() for m in mentions],
            target_account=target_account,
            last_7_days=last_7_days,
        )


class SupabaseSink(MentionSink):
    """Inserts one twitter_data row per mention; errors propagate"""

    def __init__(self, db: SupabaseManager):
        self.db = db

    def save_snapshot(self, output, mentions):
        # An empty window leaves stored rows untouched
        if not mentions:
            return []
        return self.db.insert_twitter_data([mention_row(m) for m in mentions])

    def append(self, mentions, target_account=None, last_7_days=None):
        return self.db.insert_twitter_data([mention_row(m) for m in mentions])


def create_sink(config: Config, db: Optional[SupabaseManager] = None) -> MentionSink:
    """Pick the sink for this deployment; the store sink fails fast without credentials"""
    if config.sink == SINK_SUPABASE:
        if db is None:
            config.validate_supabase()
            db = SupabaseManager(config.supabase_url, config.supabase_key)
        logger.info('Persisting mentions to Supabase table twitter_data')
        return SupabaseSink(db)

    logger.info(f"Persisting mentions to {config.output_path}")
    return FileSink(config.output_path)
