#!/usr/bin/env python3
"""
Data models for PnP Mention Scanner
Typed records for raw search results and the mentions derived from them
"""
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .links import extract_market_pda, first_url

OPAQUE_ENTITY_KINDS = ('mentions', 'hashtags', 'cashtags', 'annotations')


def isoformat_z(moment: datetime) -> str:
    """UTC timestamp with millisecond precision and a Z suffix"""
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def utc_now_iso() -> str:
    return isoformat_z(datetime.now(timezone.utc))


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class UrlEntity:
    """One link descriptor from a tweet's entities.urls"""
    start: Optional[int] = None
    end: Optional[int] = None
    url: Optional[str] = None
    expanded_url: Optional[str] = None
    display_url: Optional[str] = None
    unwound_url: Optional[str] = None
    media_key: Optional[str] = None
    status: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    market_pda: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'UrlEntity':
        data = data or {}
        return cls(
            start=data.get('start'),
            end=data.get('end'),
            url=data.get('url'),
            expanded_url=data.get('expanded_url'),
            display_url=data.get('display_url'),
            unwound_url=data.get('unwound_url'),
            media_key=data.get('media_key'),
            status=data.get('status'),
            title=data.get('title'),
            description=data.get('description'),
            market_pda=data.get('marketPDA'),
        )

    @property
    def resolved_url(self) -> str:
        return first_url(self.expanded_url, self.url, self.display_url)

    def with_market_pda(self, market_pda: str) -> 'UrlEntity':
        return replace(self, market_pda=market_pda)

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            'start': self.start,
            'end': self.end,
            'url': self.url,
            'expanded_url': self.expanded_url,
            'display_url': self.display_url,
            'unwound_url': self.unwound_url,
            'media_key': self.media_key,
            'status': self.status,
            'title': self.title,
            'description': self.description,
            'marketPDA': self.market_pda,
        })


@dataclass(frozen=True)
class TweetEntities:
    """Structured entities; only urls are interpreted, other kinds pass through"""
    urls: Optional[Tuple[UrlEntity, ...]] = None
    mentions: Optional[Tuple[Dict[str, Any], ...]] = None
    hashtags: Optional[Tuple[Dict[str, Any], ...]] = None
    cashtags: Optional[Tuple[Dict[str, Any], ...]] = None
    annotations: Optional[Tuple[Dict[str, Any], ...]] = None

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> Optional['TweetEntities']:
        if data is None:
            return None
        urls = data.get('urls')
        opaque = {kind: tuple(data[kind]) for kind in OPAQUE_ENTITY_KINDS if data.get(kind) is not None}
        return cls(
            urls=tuple(UrlEntity.from_api(u) for u in urls) if urls is not None else None,
            **opaque,
        )

    def with_urls(self, urls: List[UrlEntity]) -> 'TweetEntities':
        return replace(self, urls=tuple(urls))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for kind in OPAQUE_ENTITY_KINDS:
            value = getattr(self, kind)
            if value is not None:
                out[kind] = list(value)
        if self.urls is not None:
            out['urls'] = [u.to_dict() for u in self.urls]
        return out


@dataclass(frozen=True)
class RawTweet:
    """A search result item, restricted to the fields the scanner consumes"""
    id: str
    text: Optional[str] = None
    created_at: Optional[str] = None
    author_id: Optional[str] = None
    conversation_id: Optional[str] = None
    public_metrics: Optional[Dict[str, Any]] = None
    entities: Optional[TweetEntities] = None
    referenced_tweets: Optional[Tuple[Dict[str, Any], ...]] = None
    lang: Optional[str] = None
    source: Optional[str] = None
    in_reply_to_user_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RawTweet':
        referenced = data.get('referenced_tweets')
        return cls(
            id=str(data['id']),
            text=data.get('text'),
            created_at=data.get('created_at'),
            author_id=data.get('author_id'),
            conversation_id=data.get('conversation_id'),
            public_metrics=data.get('public_metrics'),
            entities=TweetEntities.from_api(data.get('entities')),
            referenced_tweets=tuple(referenced) if referenced is not None else None,
            lang=data.get('lang'),
            source=data.get('source'),
            in_reply_to_user_id=data.get('in_reply_to_user_id'),
        )


@dataclass(frozen=True)
class Mention(RawTweet):
    """A qualifying mention: a tweet with at least one pnp.exchange market link"""
    is_mention_of_target: bool = True

    @classmethod
    def from_tweet(cls, tweet: RawTweet, entities: Optional[TweetEntities]) -> 'Mention':
        return cls(
            id=tweet.id,
            text=tweet.text,
            created_at=tweet.created_at,
            author_id=tweet.author_id,
            conversation_id=tweet.conversation_id,
            public_metrics=tweet.public_metrics,
            entities=entities,
            referenced_tweets=tweet.referenced_tweets,
            lang=tweet.lang,
            source=tweet.source,
            in_reply_to_user_id=tweet.in_reply_to_user_id,
        )

    @property
    def market_pda(self) -> Optional[str]:
        """First market PDA carried by the link entities, if any"""
        for entity in (self.entities.urls if self.entities and self.entities.urls else ()):
            if entity.market_pda:
                return entity.market_pda
            pda = extract_market_pda(entity.resolved_url)
            if pda:
                return pda
        return None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            'id': self.id,
            'text': self.text,
            'created_at': self.created_at,
            'author_id': self.author_id,
            'conversation_id': self.conversation_id,
            'public_metrics': self.public_metrics,
            'entities': self.entities.to_dict() if self.entities is not None else None,
            'referenced_tweets': list(self.referenced_tweets) if self.referenced_tweets is not None else None,
            'lang': self.lang,
            'source': self.source,
            'in_reply_to_user_id': self.in_reply_to_user_id,
            'is_mention_of_target': self.is_mention_of_target,
        })
