"""Label matching used by the picker filter."""

from .fuzzy import fuzzy_score, match_labels

__all__ = ["fuzzy_score", "match_labels"]
