"""
민감 성분 필터
사용자의 알려진 민감 성분에 해당하는 추천 성분과 제품을 걸러냄
"""

from typing import List, Optional, Sequence
import logging

from matchcare.config.semantic_config import SensitivityConfig
from matchcare.models.analysis_models import Recommendation
from matchcare.models.request import ProductRecord

logger = logging.getLogger(__name__)

def _normalize_tags(sensitivities: Optional[Sequence[str]]) -> List[str]:
    return [s.strip().lower() for s in sensitivities or [] if s and s.strip()]

class SensitivityFilter:
    """민감 성분 필터 (입력을 변경하지 않는 순수 필터)"""

    def __init__(self, config: type = SensitivityConfig):
        self.config = config

    def markers_for(self, sensitivity: str) -> List[str]:
        """민감 태그의 성분명 포함 문자열 (등록되지 않은 태그는 태그 자체)"""
        tag = sensitivity.strip().lower()
        return self.config.SENSITIVITY_MARKERS.get(tag, [tag])

    def is_problematic(self, recommendation: Recommendation, sensitivities: Sequence[str]) -> bool:
        name = recommendation.ingredient.lower()
        label = recommendation.label.lower()
        for sensitivity in _normalize_tags(sensitivities):
            for marker in self.markers_for(sensitivity):
                if marker in name or marker in label:
                    return True
        return False

    def filter(self, recommendations: List[Recommendation],
               sensitivities: Optional[Sequence[str]]) -> List[Recommendation]:
        """
        민감 성분에 해당하는 추천 제거 (순서 유지)

        민감 태그를 추가하면 결과는 같거나 부분집합이 된다.
        """
        if not _normalize_tags(sensitivities):
            return list(recommendations)

        kept = []
        for recommendation in recommendations:
            if self.is_problematic(recommendation, sensitivities):
                logger.debug(f"민감 성분 필터링: {recommendation.ingredient}")
                continue
            kept.append(recommendation)
        return kept

    def filter_products(self, products: List[ProductRecord],
                        sensitivities: Optional[Sequence[str]]) -> List[ProductRecord]:
        """
        후보 제품 사전 필터

        등록된 민감 태그마다 대응하는 *_free 플래그가 True인 제품만 남긴다.
        """
        checks = [
            self.config.FORMULATION_CHECKS[tag]
            for tag in _normalize_tags(sensitivities)
            if tag in self.config.FORMULATION_CHECKS
        ]
        if not checks:
            return list(products)

        kept = [
            product for product in products
            if all(getattr(product, check['property']) is True for check in checks)
        ]
        logger.debug(f"제품 민감 성분 필터: {len(products)}개 → {len(kept)}개")
        return kept
