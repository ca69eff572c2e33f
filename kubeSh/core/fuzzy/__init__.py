# kubeSh/core/fuzzy/__init__.py
"""
kubeSh Core Fuzzy Module

Ranking and filtering of candidate strings.
"""

from .matcher import match, rank, score, ScoredCandidate

__all__ = ['match', 'rank', 'score', 'ScoredCandidate']
