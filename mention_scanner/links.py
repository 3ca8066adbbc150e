#!/usr/bin/env python3
"""
Link utilities for PnP Mention Scanner
Detects pnp.exchange market links and extracts the market PDA from them
"""
import re
from urllib.parse import urlparse
from typing import Optional

# Pre-compiled regex patterns for link matching
RE_MARKET_HOST = re.compile(r'(?:www\.)?pnp\.exchange', re.IGNORECASE)
RE_MARKET_PDA = re.compile(r'[A-Za-z0-9][A-Za-z0-9_-]*')
RE_MARKET_URL_IN_TEXT = re.compile(r'https?://(?:www\.)?pnp\.exchange/[A-Za-z0-9][A-Za-z0-9_-]*', re.IGNORECASE)
RE_SCHEME = re.compile(r'[A-Za-z][A-Za-z0-9+.-]*://')


def extract_market_pda(raw_url: Optional[str]) -> Optional[str]:
    """
    Extract the market PDA from a pnp.exchange URL.

    Accepts full URLs and bare display forms:
      https://pnp.exchange/ABCDEFG          -> ABCDEFG
      https://www.pnp.exchange/ABCDEFG?ref=1 -> ABCDEFG
      pnp.exchange/ABCDEFG/                 -> ABCDEFG

    Returns None for other hosts, an empty first segment, a segment with
    disallowed characters, or an unparsable URL.
    """
    if not raw_url:
        return None

    # display_url values come without a scheme
    normalized = raw_url if RE_SCHEME.match(raw_url) else f"https://{raw_url}"
    try:
        parsed = urlparse(normalized)
        hostname = parsed.hostname or ''
    except ValueError:
        return None

    if not RE_MARKET_HOST.fullmatch(hostname):
        return None

    segment = parsed.path.lstrip('/').split('/')[0] if parsed.path else ''
    if not segment or not RE_MARKET_PDA.fullmatch(segment):
        return None
    return segment


def has_market_url_in_text(text: Optional[str]) -> bool:
    """Check free text for a pnp.exchange/{marketPDA} link anywhere in it"""
    text = (text or '').strip()
    if not text:
        return False
    return RE_MARKET_URL_IN_TEXT.search(text) is not None


def first_url(*candidates: Optional[str]) -> str:
    """Return the first non-empty URL form, in the order given"""
    for value in candidates:
        if value:
            return str(value)
    return ''
