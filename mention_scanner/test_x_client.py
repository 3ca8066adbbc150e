#!/usr/bin/env python3
"""
Tests for the recent-search client
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
import requests

from mention_scanner.x_client import (
    InvalidRequestError,
    RateLimitError,
    XApiError,
    XSearchClient,
)


def response(status_code=200, body=None, headers=None, text=""):
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = body if body is not None else {}
    resp.headers = headers or {}
    resp.text = text
    return resp


class TestXSearchClient:
    """Request building, error mapping and pagination"""

    def setup_method(self):
        self.session = requests.Session()
        self.session.get = Mock(return_value=response(body={"data": [], "meta": {}}))
        self.client = XSearchClient("token-123", session=self.session)

    def last_params(self):
        return self.session.get.call_args[1]["params"]

    def test_bearer_header(self):
        assert self.session.headers["Authorization"] == "Bearer token-123"

    def test_requires_token(self):
        with pytest.raises(ValueError):
            XSearchClient("")

    def test_search_params(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)

        self.client.search_recent("@acct has:links -is:retweet", start_time=start, since_id="123")

        params = self.last_params()
        assert params["query"] == "@acct has:links -is:retweet"
        assert params["max_results"] == 100
        assert params["start_time"] == "2024-01-01T00:00:00.000Z"
        assert params["since_id"] == "123"
        assert "entities" in params["tweet.fields"].split(",")
        assert params["expansions"] == "author_id,referenced_tweets.id"
        assert "end_time" not in params
        assert "next_token" not in params

    def test_end_time_is_clamped_behind_now(self):
        now = datetime.now(timezone.utc)

        self.client.search_recent("q", end_time=now)

        sent = datetime.strptime(self.last_params()["end_time"], "%Y-%m-%dT%H:%M:%S.%fZ").replace(tzinfo=timezone.utc)
        assert sent <= now - timedelta(seconds=9)

    def test_empty_expansions_are_omitted(self):
        self.client.search_recent("q", max_results=10, tweet_fields=["id", "created_at"], expansions=[])

        params = self.last_params()
        assert params["tweet.fields"] == "id,created_at"
        assert params["max_results"] == 10
        assert "expansions" not in params

    def test_rate_limit(self):
        self.session.get.return_value = response(429, headers={"x-rate-limit-reset": "1700000000"})

        with pytest.raises(RateLimitError) as exc:
            self.client.search_recent("q")
        assert exc.value.status_code == 429

    def test_invalid_request(self):
        self.session.get.return_value = response(400, text="Invalid 'start_time'")

        with pytest.raises(InvalidRequestError):
            self.client.search_recent("q")

    def test_other_errors(self):
        self.session.get.return_value = response(503, text="unavailable")

        with pytest.raises(XApiError) as exc:
            self.client.search_recent("q")
        assert not isinstance(exc.value, (RateLimitError, InvalidRequestError))
        assert exc.value.status_code == 503

    def test_iter_tweets_follows_next_token(self):
        self.session.get.side_effect = [
            response(body={"data": [{"id": "3"}, {"id": "2"}], "meta": {"next_token": "abc"}}),
            response(body={"data": [{"id": "1"}], "meta": {}}),
        ]

        ids = [t["id"] for t in self.client.iter_tweets("q", since_id="0")]

        assert ids == ["3", "2", "1"]
        second_params = self.session.get.call_args_list[1][1]["params"]
        assert second_params["next_token"] == "abc"
        assert second_params["since_id"] == "0"

    def test_iter_tweets_respects_max_pages(self):
        self.session.get.return_value = response(body={"data": [{"id": "9"}], "meta": {"next_token": "more"}})

        ids = [t["id"] for t in self.client.iter_tweets("q", max_pages=2)]

        assert ids == ["9", "9"]
        assert self.session.get.call_count == 2

    def test_iter_tweets_empty_page(self):
        self.session.get.return_value = response(body={"meta": {"result_count": 0}})

        assert list(self.client.iter_tweets("q")) == []
