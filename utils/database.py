import logging
from typing import List, Dict, Any, Optional
from supabase import create_client, Client

logger = logging.getLogger(__name__)

TWITTER_DATA_TABLE = 'twitter_data'


# Database-specific exceptions
class DatabaseError(Exception):
    """Base database error"""
    pass

class QueryError(DatabaseError):
    """Query execution failed"""
    pass


class SupabaseManager:
    """Supabase access for stored mention rows (table twitter_data)"""

    def __init__(self, url: str, key: str, client: Optional[Client] = None):
        if not url or not key:
            raise ValueError('SUPABASE_URL or SUPABASE_SERVICE_KEY/ANON_KEY missing in environment.')
        self.client: Client = client or create_client(url, key)

    # =============================================================================
    # TWITTER DATA METHODS
    # =============================================================================

    def insert_twitter_data(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows of {tweets_json, market_pda}. Failures are raised, never retried."""
        if not rows:
            return []
        try:
            result = self.client.table(TWITTER_DATA_TABLE).insert(rows).execute()
        except Exception as e:
            logger.error(f"Error inserting {len(rows)} rows into {TWITTER_DATA_TABLE}: {e}")
            raise QueryError(f"Insert into {TWITTER_DATA_TABLE} failed: {e}") from e

        logger.info(f"Inserted {len(rows)} rows into {TWITTER_DATA_TABLE}")
        return result.data or []

    def get_twitter_data_by_id(self, row_id: int) -> Optional[Dict[str, Any]]:
        """Get one stored row by its row id."""
        try:
            result = self.client.table(TWITTER_DATA_TABLE)\
                .select('*')\
                .eq('id', row_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting {TWITTER_DATA_TABLE} row {row_id}: {e}")
            raise QueryError(f"Select from {TWITTER_DATA_TABLE} failed: {e}") from e

        return result.data[0] if result.data else None

    def get_twitter_data_in_range(self, from_id: int, to_id: int) -> List[Dict[str, Any]]:
        """Get stored rows with row id in [min, max] of the bounds, ascending."""
        low, high = min(from_id, to_id), max(from_id, to_id)
        try:
            result = self.client.table(TWITTER_DATA_TABLE)\
                .select('*')\
                .gte('id', low)\
                .lte('id', high)\
                .order('id')\
                .execute()
        except Exception as e:
            logger.error(f"Error getting {TWITTER_DATA_TABLE} rows {low}..{high}: {e}")
            raise QueryError(f"Range select from {TWITTER_DATA_TABLE} failed: {e}") from e

        return result.data or []
