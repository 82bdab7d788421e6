"""
공유 유틸리티 함수들
"""
from typing import Iterable, List
import math

def round_half_up(value: float) -> int:
    """
    사사오입 반올림 (0.5는 항상 올림)

    Args:
        value: 반올림할 값

    Returns:
        정수 결과

    Example:
        >>> round_half_up(66.5)
        67
        >>> round(66.5)  # 내장 round는 짝수 반올림
        66
    """
    return int(math.floor(value + 0.5))

def clamp(value: float, lower: float, upper: float) -> float:
    """값을 [lower, upper] 범위로 제한"""
    return max(lower, min(upper, value))

def unique_in_order(items: Iterable[str]) -> List[str]:
    """순서를 유지하며 중복 제거"""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
