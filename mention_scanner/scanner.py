#!/usr/bin/env python3
"""
PnP Mention Scanner - search orchestration
Runs one bounded search, pages through it, filters for market links and
reports the highest tweet id seen
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .logging_ext import performance_timer
from .matching import MentionMatcher
from .models import Mention, RawTweet
from .watermark import Watermark
from .x_client import InvalidRequestError, RateLimitError, XSearchClient

logger = logging.getLogger(__name__)


def build_mentions_query(account: str, require_links: bool = True) -> str:
    """Mentions of account, no retweets; optionally only tweets with links"""
    parts = [f"@{account}"]
    if require_links:
        parts.append('has:links')
    parts.append('-is:retweet')
    return ' '.join(parts)


@dataclass
class SearchResult:
    """Qualifying mentions in API order (newest first) plus the max id seen"""
    tweets: List[Mention] = field(default_factory=list)
    max_seen_id: Optional[str] = None


class MentionSearcher:
    """Searches mentions of an account for pnp.exchange market links"""

    def __init__(self, client: XSearchClient, matcher: Optional[MentionMatcher] = None,
                 max_pages: Optional[int] = None, require_links: bool = True):
        self.client = client
        self.matcher = matcher or MentionMatcher()
        self.max_pages = max_pages
        self.require_links = require_links

    def search(self, account: str, start_date: Optional[datetime] = None,
               end_date: Optional[datetime] = None, since_id: Optional[str] = None) -> SearchResult:
        """
        Search mentions of account in a time window or after since_id.

        Every returned tweet counts toward max_seen_id, qualifying or not.
        Upstream failures never propagate: a failed search yields no
        mentions and max_seen_id equal to since_id, even if some pages were
        already read, because partial pagination cannot be resumed.
        """
        query = build_mentions_query(account, self.require_links)
        seen = Watermark(since_id)
        tweets: List[Mention] = []

        try:
            with performance_timer('search_mentions', {'account': account, 'since_id': since_id}):
                for raw in self.client.iter_tweets(
                    query,
                    max_pages=self.max_pages,
                    start_time=start_date,
                    end_time=end_date,
                    since_id=since_id,
                ):
                    tweet = RawTweet.from_api(raw)
                    seen.observe(tweet.id)

                    mention = self.matcher.match(tweet)
                    if mention is not None:
                        tweets.append(mention)
        except RateLimitError:
            logger.warning('Rate limit reached while fetching mentions.')
            return SearchResult(max_seen_id=since_id)
        except InvalidRequestError as e:
            logger.error(f"Twitter API rejected the date range. The recent search API typically only supports last 7 days. ({e})")
            return SearchResult(max_seen_id=since_id)
        except Exception as e:
            logger.error(f"Error fetching mentions: {e}")
            return SearchResult(max_seen_id=since_id)

        logger.debug(f"Search '{query}': {len(tweets)} qualifying mentions, max_seen_id={seen.current}")
        return SearchResult(tweets=tweets, max_seen_id=seen.current)
