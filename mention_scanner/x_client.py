#!/usr/bin/env python3
"""
X (Twitter) API v2 recent-search client for PnP Mention Scanner
Single-shot requests with typed errors; no retries, the scheduler is the retry
"""
import logging
import requests
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterator, List, Optional

from .models import isoformat_z

logger = logging.getLogger(__name__)

SEARCH_RECENT_URL = 'https://api.twitter.com/2/tweets/search/recent'
MAX_RESULTS_PER_PAGE = 100

# The endpoint rejects an end_time closer than 10 seconds to the request
END_TIME_MIN_LAG = timedelta(seconds=10)

TWEET_FIELDS = [
    'id',
    'text',
    'created_at',
    'public_metrics',
    'author_id',
    'conversation_id',
    'entities',
    'referenced_tweets',
    'lang',
    'source',
    'in_reply_to_user_id',
]
EXPANSIONS = ['author_id', 'referenced_tweets.id']


class XApiError(Exception):
    """Non-success response from the X API"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(XApiError):
    """429 Too Many Requests"""
    pass


class InvalidRequestError(XApiError):
    """400 Invalid Request, typically a time window beyond the recent-search lookback"""
    pass


class XSearchClient:
    """Bearer-token client for /2/tweets/search/recent"""

    def __init__(self, bearer_token: str, session: Optional[requests.Session] = None, timeout_s: float = 15):
        if not bearer_token:
            raise ValueError('A bearer token is required')
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f"Bearer {bearer_token}",
            'User-Agent': 'PnPMentionScanner/1.0',
        })
        self.timeout_s = timeout_s

    def _raise_for_status(self, response: requests.Response):
        if response.status_code < 400:
            return
        detail = response.text[:500]
        if response.status_code == 429:
            reset = response.headers.get('x-rate-limit-reset')
            raise RateLimitError(f"429 Rate limit exceeded (reset={reset})", status_code=429)
        if response.status_code == 400:
            raise InvalidRequestError(f"400 Invalid Request: {detail}", status_code=400)
        raise XApiError(f"{response.status_code} X API error: {detail}", status_code=response.status_code)

    def search_recent(self, query: str, start_time: Optional[datetime] = None,
                      end_time: Optional[datetime] = None, since_id: Optional[str] = None,
                      max_results: int = MAX_RESULTS_PER_PAGE, next_token: Optional[str] = None,
                      tweet_fields: Optional[List[str]] = None,
                      expansions: Optional[List[str]] = None) -> Dict[str, Any]:
        """Fetch one page of recent-search results (the decoded JSON body)"""
        params: Dict[str, Any] = {
            'query': query,
            'max_results': max(10, min(max_results, MAX_RESULTS_PER_PAGE)),
            'tweet.fields': ','.join(tweet_fields if tweet_fields is not None else TWEET_FIELDS),
        }
        fields_expansions = expansions if expansions is not None else EXPANSIONS
        if fields_expansions:
            params['expansions'] = ','.join(fields_expansions)
        if start_time:
            params['start_time'] = isoformat_z(start_time)
        if end_time:
            latest_allowed = datetime.now(timezone.utc) - END_TIME_MIN_LAG
            params['end_time'] = isoformat_z(min(end_time, latest_allowed))
        if since_id:
            params['since_id'] = since_id
        if next_token:
            params['next_token'] = next_token

        response = self.session.get(SEARCH_RECENT_URL, params=params, timeout=self.timeout_s)
        self._raise_for_status(response)
        return response.json()

    def iter_tweets(self, query: str, max_pages: Optional[int] = None, **params) -> Iterator[Dict[str, Any]]:
        """Yield raw tweets across pages, following meta.next_token"""
        next_token = None
        page = 0
        while max_pages is None or page < max_pages:
            body = self.search_recent(query, next_token=next_token, **params)
            for tweet in body.get('data') or []:
                yield tweet

            page += 1
            next_token = (body.get('meta') or {}).get('next_token')
            if not next_token:
                break
        else:
            logger.debug(f"Stopped paging after {page} pages (max_pages={max_pages})")
