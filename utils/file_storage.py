#!/usr/bin/env python3
"""
JSON document storage for mention snapshots
Whole-document writes and read-modify-write appends
"""
import os
import json
import logging
import tempfile
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Serialises read-modify-write across scheduler and HTTP threads
_document_lock = threading.RLock()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def empty_document(target_account: Optional[str] = None, last_7_days: Optional[bool] = None) -> Dict[str, Any]:
    """Output document with no tweets"""
    return {
        'metadata': {
            'count': 0,
            'generated_at': _now_iso(),
            'query_parameters': {
                'target_account': target_account or 'unknown',
                'start_date': None,
                'end_date': None,
                'last_7_days': last_7_days is True,
            },
        },
        'tweets': [],
    }


class FileStorage:
    """Reads and writes output documents as 2-space indented UTF-8 JSON"""

    def _write(self, output_path: str, data: Dict[str, Any]):
        directory = os.path.dirname(output_path) or '.'
        os.makedirs(directory, exist_ok=True)

        # Write beside the target then swap, so readers never see half a document
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.mentions-', suffix='.json.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, output_path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def load_json(self, output_path: str) -> Optional[Dict[str, Any]]:
        """Return the parsed document, or None if it is missing or unreadable"""
        try:
            with open(output_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable document {output_path}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def save_json(self, output_path: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite the document at output_path"""
        with _document_lock:
            self._write(output_path, data)
        logger.info(f"Saved {len(data.get('tweets', []))} tweets to {output_path}")
        return {'path': output_path}

    def append_tweets(self, output_path: str, tweets: List[Dict[str, Any]],
                      target_account: Optional[str] = None,
                      last_7_days: Optional[bool] = None) -> Dict[str, Any]:
        """
        Append tweets to the document at output_path.

        A missing or unparsable document starts over from an empty one.
        Tweets are concatenated as given: no dedup, no reordering. The
        metadata count and generated_at are refreshed; target_account and
        last_7_days are only overwritten when supplied.
        """
        with _document_lock:
            current = self.load_json(output_path) or empty_document(target_account, last_7_days)

            current['tweets'] = list(current.get('tweets') or []) + list(tweets)
            metadata = current.setdefault('metadata', {})
            metadata['count'] = len(current['tweets'])
            metadata['generated_at'] = _now_iso()
            query_parameters = metadata.setdefault('query_parameters', {})
            if target_account:
                query_parameters['target_account'] = target_account
            if isinstance(last_7_days, bool):
                query_parameters['last_7_days'] = last_7_days

            self._write(output_path, current)

        logger.info(f"Appended {len(tweets)} tweets to {output_path} (total {metadata['count']})")
        return {'path': output_path, 'appended': len(tweets), 'total': metadata['count']}
