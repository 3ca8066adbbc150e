#!/usr/bin/env python3
"""
Tests for the HTTP surface
"""
from unittest.mock import Mock

import pytest

from mention_scanner.api import create_app


@pytest.fixture
def service():
    svc = Mock()
    svc.target_account = 'acct'
    svc.fetch_recent_mentions.return_value = {'metadata': {'count': 0}, 'tweets': []}
    return svc


@pytest.fixture
def db():
    return Mock()


@pytest.fixture
def client(service, db):
    return create_app(service, db).test_client()


class TestMentionsRoute:

    def test_backfill_without_save(self, client, service):
        response = client.get('/mentions')

        assert response.status_code == 200
        assert response.get_json() == {'metadata': {'count': 0}, 'tweets': []}
        service.fetch_recent_mentions.assert_called_once_with(False)

    def test_save_only_for_literal_true(self, client, service):
        client.get('/mentions?save=true')
        service.fetch_recent_mentions.assert_called_with(True)

        client.get('/mentions?save=1')
        service.fetch_recent_mentions.assert_called_with(False)

    def test_failure_degrades_to_empty_document(self, client, service):
        service.fetch_recent_mentions.side_effect = RuntimeError('boom')

        response = client.get('/mentions')

        assert response.status_code == 200
        body = response.get_json()
        assert body['tweets'] == []
        assert body['metadata']['count'] == 0
        assert body['metadata']['query_parameters']['target_account'] == 'acct'
        assert body['metadata']['query_parameters']['last_7_days'] is True


class TestStoredRows:

    def test_row_by_id(self, client, db):
        db.get_twitter_data_by_id.return_value = {'id': 7, 'market_pda': 'M'}

        response = client.get('/mentions/data/7')

        assert response.get_json() == {'id': 7, 'market_pda': 'M'}
        db.get_twitter_data_by_id.assert_called_once_with(7)

    def test_row_missing_is_empty_object(self, client, db):
        db.get_twitter_data_by_id.return_value = None

        assert client.get('/mentions/data/8').get_json() == {}

    @pytest.mark.parametrize('raw_id', ['abc', '1_000', '+3', '%207%20', '1.5'])
    def test_row_invalid_id(self, client, db, raw_id):
        response = client.get('/mentions/data/' + raw_id)

        assert response.get_json() == {'error': 'Invalid id'}
        db.get_twitter_data_by_id.assert_not_called()

    def test_range(self, client, db):
        db.get_twitter_data_in_range.return_value = [{'id': 3}, {'id': 4}]

        response = client.get('/mentions/data?from=4&to=3')

        assert response.get_json() == [{'id': 3}, {'id': 4}]
        db.get_twitter_data_in_range.assert_called_once_with(4, 3)

    @pytest.mark.parametrize('query', ['', '?from=1', '?to=2', '?from=&to=2'])
    def test_range_missing_params(self, client, db, query):
        response = client.get('/mentions/data' + query)

        assert response.get_json() == {'error': 'Missing from/to query params'}
        db.get_twitter_data_in_range.assert_not_called()

    def test_range_invalid_params(self, client, db):
        response = client.get('/mentions/data?from=1_000&to=2')

        assert response.get_json() == {'error': 'Invalid from/to'}
        db.get_twitter_data_in_range.assert_not_called()


def test_row_routes_absent_without_store(service):
    client = create_app(service).test_client()

    assert client.get('/mentions/data/1').status_code == 404
    assert client.get('/mentions/data?from=1&to=2').status_code == 404
