"""
추론 결과 캐시
프로필 시그니처 기반 TTL + LRU 메모리 캐시
"""

import copy
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from matchcare.utils.ingredient_matcher import normalize_concerns

logger = logging.getLogger(__name__)

def build_profile_signature(skin_type: str, concerns: Optional[Sequence[str]] = None,
                            sensitivities: Optional[Sequence[str]] = None) -> str:
    """
    캐시 키 생성: "{피부타입}|{정렬된 고민}|{정렬된 민감 태그}"

    Example:
        >>> build_profile_signature("Oily", ["Large Pores", "acne"], ["fragrance"])
        'oily|acne,largepores|fragrance'
    """
    skin = getattr(skin_type, 'value', skin_type) or ""
    concern_part = ",".join(sorted(normalize_concerns(concerns)))
    sensitivity_part = ",".join(sorted({s.strip().lower() for s in sensitivities or [] if s and s.strip()}))
    return f"{skin.strip().lower()}|{concern_part}|{sensitivity_part}"

@dataclass
class CacheEntry:
    """캐시 엔트리"""
    key: str
    value: Any
    created_at: float
    expires_at: float
    generation: int = 0
    access_count: int = 0

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

@dataclass
class CacheStats:
    """캐시 통계"""
    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    evictions: int = 0
    expired_entries: int = 0

    @property
    def hit_rate(self) -> float:
        """캐시 히트율 (%)"""
        if self.total_requests == 0:
            return 0.0
        return (self.cache_hits / self.total_requests) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_requests': self.total_requests,
            'cache_hits': self.cache_hits,
            'cache_misses': self.cache_misses,
            'evictions': self.evictions,
            'expired_entries': self.expired_entries,
            'hit_rate': round(self.hit_rate, 2)
        }

class ReasoningCache:
    """시맨틱 추론 결과 캐시 (스레드 안전)"""

    def __init__(self, ttl_seconds: int = 3600, max_size: int = 1000,
                 clock: Callable[[], float] = time.monotonic):
        """
        캐시 초기화

        Args:
            ttl_seconds: 저장 시점부터의 유효 시간 (초)
            max_size: 최대 엔트리 수 (초과 시 LRU 제거)
            clock: 시간 함수 (테스트에서 교체 가능)
        """
        self.ttl_seconds = ttl_seconds
        self.max_size = max(1, max_size)
        self._clock = clock
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._stats = CacheStats()
        self._lock = threading.RLock()

        logger.info(f"ReasoningCache 초기화: max_size={self.max_size}, ttl={ttl_seconds}s")

    def get(self, key: str, generation: Optional[int] = None) -> Optional[Any]:
        """
        캐시 조회

        만료되었거나 다른 그래프 세대에서 만들어진 값은 미스로 처리한다.
        히트 시 저장된 값의 깊은 복사본을 반환한다.
        """
        with self._lock:
            self._stats.total_requests += 1
            entry = self._cache.get(key)

            if entry is None:
                self._stats.cache_misses += 1
                logger.debug(f"캐시 미스: {key}")
                return None

            if entry.is_expired(self._clock()):
                del self._cache[key]
                self._stats.cache_misses += 1
                self._stats.expired_entries += 1
                logger.debug(f"캐시 만료: {key}")
                return None

            if generation is not None and entry.generation != generation:
                del self._cache[key]
                self._stats.cache_misses += 1
                logger.debug(f"이전 세대 캐시 무효화: {key} (세대 {entry.generation} → {generation})")
                return None

            entry.access_count += 1
            self._cache.move_to_end(key)
            self._stats.cache_hits += 1
            logger.debug(f"캐시 히트: {key} (접근 횟수: {entry.access_count})")
            return copy.deepcopy(entry.value)

    def put(self, key: str, value: Any, generation: int = 0):
        """캐시 저장 (기존 키는 덮어쓰고 TTL을 새로 시작)"""
        with self._lock:
            now = self._clock()
            self._cache[key] = CacheEntry(
                key=key,
                value=copy.deepcopy(value),
                created_at=now,
                expires_at=now + self.ttl_seconds,
                generation=generation
            )
            self._cache.move_to_end(key)
            self._evict_if_needed()
            logger.debug(f"캐시 저장: {key} (TTL: {self.ttl_seconds}s)")

    def delete(self, key: str) -> bool:
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                logger.debug(f"캐시 삭제: {key}")
                return True
            return False

    def clear(self) -> int:
        """
        모든 캐시 삭제

        Returns:
            int: 삭제된 엔트리 수
        """
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            logger.info(f"추론 캐시 전체 삭제: {count}개 엔트리")
            return count

    def cleanup_expired(self) -> int:
        """
        만료된 엔트리 정리

        Returns:
            int: 정리된 엔트리 수
        """
        with self._lock:
            now = self._clock()
            expired_keys = [key for key, entry in self._cache.items() if entry.is_expired(now)]
            for key in expired_keys:
                del self._cache[key]
                self._stats.expired_entries += 1

            if expired_keys:
                logger.info(f"만료된 캐시 정리: {len(expired_keys)}개 엔트리")
            return len(expired_keys)

    def size(self) -> int:
        with self._lock:
            return len(self._cache)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def get_stats(self) -> CacheStats:
        """캐시 통계 스냅샷"""
        with self._lock:
            return CacheStats(
                total_requests=self._stats.total_requests,
                cache_hits=self._stats.cache_hits,
                cache_misses=self._stats.cache_misses,
                evictions=self._stats.evictions,
                expired_entries=self._stats.expired_entries
            )

    def _evict_if_needed(self):
        """최대 크기 초과 시 가장 오래 사용되지 않은 엔트리 제거"""
        while len(self._cache) > self.max_size:
            oldest_key, _ = self._cache.popitem(last=False)
            self._stats.evictions += 1
            logger.debug(f"캐시 제거 (LRU): {oldest_key}")
