#!/usr/bin/env python3
"""
Matching utilities for PnP Mention Scanner
Decides whether a search result is a market mention and tags its links with the market PDA
"""
import logging
from typing import Optional

from .links import extract_market_pda, has_market_url_in_text
from .models import Mention, RawTweet, TweetEntities

logger = logging.getLogger(__name__)


def has_market_link(tweet: RawTweet) -> bool:
    """True if any link entity or the raw text points at a pnp.exchange market"""
    urls = tweet.entities.urls if tweet.entities and tweet.entities.urls else ()
    if any(extract_market_pda(u.resolved_url) for u in urls):
        return True
    return has_market_url_in_text(tweet.text)


def augment_entities(entities: Optional[TweetEntities]) -> Optional[TweetEntities]:
    """Copy entities, attaching marketPDA to every url entity that resolves to a market"""
    if entities is None or entities.urls is None:
        return entities

    augmented = []
    for entity in entities.urls:
        market_pda = extract_market_pda(entity.resolved_url)
        augmented.append(entity.with_market_pda(market_pda) if market_pda else entity)
    return entities.with_urls(augmented)


class MentionMatcher:
    """Turns raw search results into qualifying mentions"""

    def match(self, tweet: RawTweet) -> Optional[Mention]:
        """Return the augmented Mention, or None when the tweet carries no market link"""
        if not has_market_link(tweet):
            logger.debug(f"Dropped tweet {tweet.id}: no pnp.exchange market link")
            return None
        return Mention.from_tweet(tweet, augment_entities(tweet.entities))
