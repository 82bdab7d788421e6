"""
실행 시간 측정
API 핸들러와 추론 단계별 소요 시간(ms)을 기록
"""
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

logger = logging.getLogger(__name__)

@dataclass
class TimeMetrics:
    """측정 결과 (ms 단위)"""
    start_time: Optional[datetime]
    end_time: Optional[datetime] = None
    total_ms: float = 0.0
    step_times: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, float]:
        result = {'total_ms': round(self.total_ms, 2)}
        for step_name, elapsed in self.step_times.items():
            result[f"{step_name}_ms"] = round(elapsed, 2)
        return result

class TimeTracker:
    """
    구간 시간 측정기

    Usage:
        tracker = TimeTracker("score_product").start()
        tracker.step('semantic_analysis')
        metrics = tracker.finish()

        with TimeTracker("reload") as tracker:
            ...
        tracker.metrics.total_ms
    """

    def __init__(self, name: str = "operation"):
        self.name = name
        self.step_times: Dict[str, float] = {}
        self.metrics: Optional[TimeMetrics] = None
        self._began: Optional[float] = None
        self._mark: Optional[float] = None
        self._began_at: Optional[datetime] = None

    def start(self) -> "TimeTracker":
        self._began = self._mark = time.perf_counter()
        self._began_at = datetime.now()
        self.step_times = {}
        logger.debug(f"⏱️ {self.name} 측정 시작")
        return self

    def _elapsed_ms(self, since: float) -> float:
        return (time.perf_counter() - since) * 1000

    def step(self, step_name: str) -> float:
        """직전 구간 이후 경과 시간(ms)을 단계 이름으로 기록"""
        if self._mark is None:
            raise ValueError(f"{self.name}: start() 호출 전에는 단계를 기록할 수 없습니다")

        elapsed = self._elapsed_ms(self._mark)
        self._mark = time.perf_counter()
        self.step_times[step_name] = elapsed
        logger.debug(f"📊 {self.name}/{step_name}: {elapsed:.2f}ms")
        return elapsed

    def finish(self) -> TimeMetrics:
        if self._began is None:
            raise ValueError(f"{self.name}: start() 호출 전에는 종료할 수 없습니다")

        self.metrics = TimeMetrics(
            start_time=self._began_at,
            end_time=datetime.now(),
            total_ms=self._elapsed_ms(self._began),
            step_times=dict(self.step_times)
        )
        logger.info(f"✅ {self.name} 완료: {self.metrics.total_ms:.2f}ms")
        return self.metrics

    def __enter__(self) -> "TimeTracker":
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.finish()
        return False
