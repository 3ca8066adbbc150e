#!/usr/bin/env python3
"""
PnP Mention Scanner
Polls X mentions of the target account for pnp.exchange market links
"""

# Core components
from .links import extract_market_pda, has_market_url_in_text
from .matching import MentionMatcher, has_market_link
from .models import Mention, RawTweet
from .watermark import Watermark
from .scanner import MentionSearcher, SearchResult
from .x_client import XSearchClient, XApiError, RateLimitError, InvalidRequestError

# Persistence and driving
from .sinks import MentionSink, FileSink, SupabaseSink, create_sink
from .service import MentionsService, create_service

__all__ = [
    'extract_market_pda',
    'has_market_url_in_text',
    'has_market_link',
    'MentionMatcher',
    'Mention',
    'RawTweet',
    'Watermark',
    'MentionSearcher',
    'SearchResult',
    'XSearchClient',
    'XApiError',
    'RateLimitError',
    'InvalidRequestError',
    'MentionSink',
    'FileSink',
    'SupabaseSink',
    'create_sink',
    'MentionsService',
    'create_service',
]
