"""
Match Scorer

Deterministic relevance score for free-text company search.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

EXACT_TICKER = 100
TICKER_PREFIX = 90
TICKER_CONTAINS = 80
NAME_CONTAINS = 70
NO_MATCH = 0


def calculate_match_score(ticker: str | None, name: str | None, search_term: str) -> int:
    """
    Score a ticker/name pair against an already lowercased search term.

    The first matching rule wins:
        ticker == term -> 100, ticker startswith term -> 90,
        ticker contains term -> 80, name contains term -> 70, otherwise 0
    """
    ticker_lower = (ticker or "").lower()
    name_lower = (name or "").lower()

    if ticker_lower == search_term:
        return EXACT_TICKER
    if ticker_lower.startswith(search_term):
        return TICKER_PREFIX
    if search_term in ticker_lower:
        return TICKER_CONTAINS
    if search_term in name_lower:
        return NAME_CONTAINS

    return NO_MATCH
