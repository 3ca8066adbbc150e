#!/usr/bin/env python3
"""
Tests for the market mention filter and url entity augmentation
"""
from mention_scanner.matching import MentionMatcher, augment_entities, has_market_link
from mention_scanner.models import RawTweet, TweetEntities


def make_tweet(tweet_id="1", text="gm", urls=None, **extra):
    data = {"id": tweet_id, "text": text, "author_id": "42", "created_at": "2024-05-01T10:00:00.000Z"}
    if urls is not None:
        data["entities"] = {"urls": urls}
    data.update(extra)
    return RawTweet.from_api(data)


class TestMentionMatcher:
    """Filter decisions and augmentation"""

    def setup_method(self):
        self.matcher = MentionMatcher()

    def test_display_url_only(self):
        tweet = make_tweet(urls=[{"display_url": "pnp.exchange/M1"}], text="no link in here")

        mention = self.matcher.match(tweet)

        assert mention is not None
        assert mention.entities.urls[0].market_pda == "M1"
        assert mention.market_pda == "M1"
        assert mention.is_mention_of_target is True

    def test_uppercase_scheme_gets_market_pda(self):
        text = "new market HTTPS://pnp.exchange/Abc123"
        tweet = make_tweet(urls=[{"expanded_url": "HTTPS://pnp.exchange/Abc123"}], text=text)

        mention = self.matcher.match(tweet)

        assert mention.entities.urls[0].market_pda == "Abc123"
        assert mention.market_pda == "Abc123"

    def test_expanded_url_preferred_over_short_url(self):
        tweet = make_tweet(urls=[{
            "url": "https://t.co/abc",
            "expanded_url": "https://pnp.exchange/AAA",
            "display_url": "pnp.exchange/AAA",
        }])

        mention = self.matcher.match(tweet)

        assert mention.entities.urls[0].market_pda == "AAA"

    def test_first_non_empty_url_form_wins(self):
        # expanded_url is present but points elsewhere, so display_url is never consulted
        tweet = make_tweet(urls=[{
            "expanded_url": "https://example.com/page",
            "display_url": "pnp.exchange/BBB",
        }])

        assert self.matcher.match(tweet) is None

    def test_text_fallback_without_entities(self):
        tweet = make_tweet(text="trade it https://pnp.exchange/TXT1")

        mention = self.matcher.match(tweet)

        assert mention is not None
        assert mention.entities is None
        assert mention.market_pda is None

    def test_text_fallback_keeps_non_matching_entities_unmodified(self):
        tweet = make_tweet(
            text="https://pnp.exchange/TXT2",
            urls=[{"expanded_url": "https://example.com/x", "url": "https://t.co/x"}],
        )

        mention = self.matcher.match(tweet)

        assert mention.entities.urls[0].market_pda is None
        assert mention.entities.urls[0].to_dict() == {"expanded_url": "https://example.com/x", "url": "https://t.co/x"}

    def test_only_matching_entities_are_augmented(self):
        tweet = make_tweet(urls=[
            {"expanded_url": "https://example.com/x"},
            {"expanded_url": "https://www.pnp.exchange/Two?ref=1"},
        ])

        mention = self.matcher.match(tweet)

        urls = mention.to_dict()["entities"]["urls"]
        assert "marketPDA" not in urls[0]
        assert urls[1]["marketPDA"] == "Two"

    def test_no_market_link_is_dropped(self):
        tweet = make_tweet(text="hello @predictandpump", urls=[{"expanded_url": "https://example.com"}])

        assert self.matcher.match(tweet) is None
        assert not has_market_link(tweet)

    def test_mention_carries_passthrough_fields(self):
        tweet = make_tweet(
            tweet_id="1790000000000000001",
            urls=[{"expanded_url": "https://pnp.exchange/P1"}],
            public_metrics={"like_count": 3},
            lang="en",
            in_reply_to_user_id="77",
            referenced_tweets=[{"type": "replied_to", "id": "9"}],
        )

        data = self.matcher.match(tweet).to_dict()

        assert data["id"] == "1790000000000000001"
        assert data["public_metrics"] == {"like_count": 3}
        assert data["lang"] == "en"
        assert data["in_reply_to_user_id"] == "77"
        assert data["referenced_tweets"] == [{"type": "replied_to", "id": "9"}]
        assert data["is_mention_of_target"] is True
        assert "source" not in data


def test_augment_entities_passes_through_missing_urls():
    entities = TweetEntities.from_api({"hashtags": [{"tag": "pnp"}]})

    assert augment_entities(None) is None
    assert augment_entities(entities) is entities
