#!/usr/bin/env python3
"""
Watermark tracking for PnP Mention Scanner
Holds the highest tweet id seen so far; used as since_id for the next poll
"""
import re
import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)

RE_NUMERIC_ID = re.compile(r'[0-9]+')

PRIME_MAX_RESULTS = 10


def build_prime_query(account: str) -> str:
    return f"@{account} -is:retweet"


def is_newer_id(candidate: str, current: Optional[str]) -> bool:
    """
    Compare snowflake ids numerically.

    Ids are arbitrary-width decimal strings, so they are compared as Python
    ints rather than lexicographically ("100" is newer than "99").
    Raises ValueError when either id is not a decimal string.
    """
    if current is None:
        return True
    if not RE_NUMERIC_ID.fullmatch(candidate) or not RE_NUMERIC_ID.fullmatch(current):
        raise ValueError(f"non-numeric tweet id: {candidate!r} / {current!r}")
    return int(candidate) > int(current)


class Watermark:
    """
    In-memory since_id cursor.

    Monotonically non-decreasing for numeric ids. Not persisted: a restart
    starts unprimed.
    """

    def __init__(self, initial: Optional[str] = None):
        self._current = str(initial) if initial is not None else None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[str]:
        return self._current

    def observe(self, candidate: Optional[str]):
        """Adopt candidate if it is strictly newer than the held id"""
        if candidate is None:
            return
        candidate = str(candidate)
        with self._lock:
            try:
                if is_newer_id(candidate, self._current):
                    self._current = candidate
            except ValueError:
                # Lenient fallback: a malformed id must not stall the poll loop
                logger.warning(f"Could not compare tweet ids {candidate!r} and {self._current!r}; adopting {candidate!r}")
                self._current = candidate

    def advance(self, candidate: Optional[str]):
        """Move the cursor forward after a poll cycle"""
        previous = self._current
        self.observe(candidate)
        if self._current != previous:
            logger.debug(f"since_id advanced {previous} -> {self._current}")

    def prime(self, client, account: str) -> Optional[str]:
        """
        Seed the watermark with the most recent mention of account.

        Failures are logged and never raised; the watermark then stays unprimed
        and the first poll runs without a lower bound.
        """
        try:
            page = client.search_recent(
                build_prime_query(account),
                max_results=PRIME_MAX_RESULTS,
                tweet_fields=['id', 'created_at'],
                expansions=[],
            )
            tweets = page.get('data') or []
            latest = str(tweets[0]['id']) if tweets else None
        except Exception as e:
            logger.warning(f"Failed to fetch latest mention id: {e}")
            return None

        if latest:
            self.observe(latest)
        return latest
