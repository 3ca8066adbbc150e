#!/usr/bin/env python3
"""
HTTP surface for PnP Mention Scanner
Manual 7-day backfill trigger and, for store-backed deployments, stored row lookups
"""
import re
import logging
from typing import Optional

from flask import Flask, jsonify, request

from utils.database import SupabaseManager

from .service import MentionsService, build_output

logger = logging.getLogger(__name__)

RE_ROW_ID = re.compile(r'-?[0-9]+')


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or not RE_ROW_ID.fullmatch(value):
        return None
    return int(value)


def create_app(service: MentionsService, db: Optional[SupabaseManager] = None) -> Flask:
    """Build the Flask app; /mentions/data routes exist only when a store is supplied"""
    app = Flask(__name__)

    @app.route('/mentions')
    def get_mentions():
        """GET /mentions?save=true"""
        save = request.args.get('save') == 'true'
        try:
            return jsonify(service.fetch_recent_mentions(save))
        except Exception as e:
            logger.error(f"Manual mentions fetch failed: {e}")
            return jsonify(build_output([], service.target_account, None, None, last_7_days=True))

    if db is not None:
        @app.route('/mentions/data/<raw_id>')
        def get_mention_row(raw_id: str):
            row_id = _parse_int(raw_id)
            if row_id is None:
                return jsonify({'error': 'Invalid id'})
            return jsonify(db.get_twitter_data_by_id(row_id) or {})

        @app.route('/mentions/data')
        def get_mention_rows():
            raw_from = request.args.get('from')
            raw_to = request.args.get('to')
            if not raw_from or not raw_to:
                return jsonify({'error': 'Missing from/to query params'})

            from_id, to_id = _parse_int(raw_from), _parse_int(raw_to)
            if from_id is None or to_id is None:
                return jsonify({'error': 'Invalid from/to'})
            return jsonify(db.get_twitter_data_in_range(from_id, to_id))

    return app
