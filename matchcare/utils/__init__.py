"""
유틸리티 패키지
시맨틱 엔진의 헬퍼 함수들
"""

from .ingredient_matcher import (
    normalize_name,
    normalize_concern,
    normalize_concerns,
    compact,
    is_ingredient_match,
    is_concern_match,
    benefit_matches,
    canonical_ingredient
)
from .time_tracker import TimeTracker, TimeMetrics

__all__ = [
    "normalize_name",
    "normalize_concern",
    "normalize_concerns",
    "compact",
    "is_ingredient_match",
    "is_concern_match",
    "benefit_matches",
    "canonical_ingredient",
    "TimeTracker",
    "TimeMetrics"
]
