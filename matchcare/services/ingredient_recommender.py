"""
성분 추천기
사용자 피부 프로필에 대해 지식 그래프의 성분을 점수화하고 순위를 매김
"""

import logging
from typing import List, Optional, Sequence, Tuple

from matchcare.config.semantic_config import RecommenderConfig
from matchcare.models.analysis_models import Recommendation, ConfidenceFactor
from matchcare.models.knowledge_models import Ingredient, KnowledgeGraph
from matchcare.shared.utils import round_half_up
from matchcare.utils.ingredient_matcher import benefit_matches, normalize_concerns

logger = logging.getLogger(__name__)

class IngredientRecommender:
    """
    프로필 기반 성분 추천

    점수 구성 (최대 100):
    - 피부타입 적합성: 최대 40 (부분 호환 15)
    - 고민 해결: 고민당 25, 최대 50
    - 효능/안전성 보너스: 최대 10
    - 다기능 보너스: 최대 5
    - 효능 다양성 보너스: 최대 5
    """

    def __init__(self, config: type = RecommenderConfig):
        self.config = config

    def recommend(self, graph: KnowledgeGraph, skin_type: str,
                  concerns: Optional[Sequence[str]] = None) -> List[Recommendation]:
        """
        성분 추천 목록 생성

        Args:
            graph: 지식 그래프
            skin_type: 사용자 피부 타입
            concerns: 피부 고민 목록 (정규화 전)

        Returns:
            List[Recommendation]: 점수 내림차순, 상위 15개
        """
        skin = (skin_type or "").strip().lower()
        normalized_concerns = normalize_concerns(concerns)

        recommendations = []
        for name in graph.sorted_ingredient_names():
            recommendation = self._score_ingredient(graph, graph.ingredients[name], skin, normalized_concerns)
            if recommendation.score > self.config.NOISE_FLOOR:
                recommendations.append(recommendation)
            else:
                logger.debug(f"노이즈 하한 이하 제외: {name} ({recommendation.score})")

        recommendations.sort(key=lambda r: (-r.score, -r.efficacy_score, r.ingredient))
        return recommendations[:self.config.MAX_RECOMMENDATIONS]

    def _score_ingredient(self, graph: KnowledgeGraph, ingredient: Ingredient,
                          skin: str, concerns: List[str]) -> Recommendation:
        cfg = self.config
        score = 0.0
        reasons: List[str] = []
        factors: List[ConfidenceFactor] = []

        # 1. 피부타입 적합성
        skin_type_match = skin in ingredient.recommended_for
        if skin_type_match:
            score += cfg.SKIN_TYPE_MATCH_SCORE
            reasons.append(f"Ontologically recommended for {skin} skin")
            factors.append(ConfidenceFactor('skin_type_match', cfg.CONFIDENCE_WEIGHTS['skin_type_match'], 1.0))
        else:
            partial_score, partial_reason = self.check_partial_compatibility(skin, ingredient.recommended_for)
            if partial_score > 0:
                score += partial_score
                reasons.append(partial_reason)
                factors.append(ConfidenceFactor(
                    'skin_type_partial',
                    cfg.CONFIDENCE_WEIGHTS['skin_type_partial'],
                    partial_score / cfg.PARTIAL_CONFIDENCE_DIVISOR
                ))

        # 2. 고민 해결
        treated = self.treated_concerns(ingredient, concerns)
        if treated:
            score += min(cfg.CONCERN_MAX_SCORE, len(treated) * cfg.CONCERN_POINTS_PER_MATCH)
            reasons.append(f"Treats {len(treated)} of your concerns: {', '.join(treated)}")
            factors.append(ConfidenceFactor(
                'concern_treatment',
                cfg.CONFIDENCE_WEIGHTS['concern_treatment'],
                len(treated) / len(concerns)
            ))

        # 3. 효능/안전성
        score += ingredient.efficacy_score / 100 * cfg.EFFICACY_MAX_BONUS
        score += ingredient.safety_rating / 10 * cfg.SAFETY_MAX_BONUS
        if ingredient.efficacy_score > cfg.HIGH_EFFICACY_THRESHOLD:
            reasons.append(f"High efficacy rating ({ingredient.efficacy_score}/100)")
        if ingredient.safety_rating > cfg.EXCELLENT_SAFETY_THRESHOLD:
            reasons.append(f"Excellent safety profile ({ingredient.safety_rating}/10)")

        # 4. 다기능
        function_labels = [graph.function_label(f) for f in ingredient.functions]
        score += min(cfg.FUNCTION_MAX_BONUS, len(function_labels))
        if len(function_labels) > 1:
            reasons.append(f"Multi-functional: {', '.join(function_labels[:3])}")

        # 5. 효능 다양성
        benefit_labels = [graph.benefit_label(b) for b in ingredient.benefits]
        score += min(cfg.BENEFIT_MAX_BONUS, len(benefit_labels))
        if benefit_labels:
            reasons.append(f"Provides: {', '.join(benefit_labels[:3])}")

        final_score = round_half_up(min(cfg.MAX_TOTAL_SCORE, score))

        return Recommendation(
            ingredient=ingredient.name,
            label=ingredient.label,
            score=final_score,
            reasons=reasons,
            treats_concerns=treated,
            confidence_factors=factors,
            functions=list(ingredient.functions),
            benefits=list(ingredient.benefits),
            efficacy_score=ingredient.efficacy_score,
            safety_rating=ingredient.safety_rating,
            metadata={
                'ontology_based': graph.loaded,
                'skin_type_match': skin_type_match,
                'concerns_addressed': len(treated)
            }
        )

    def check_partial_compatibility(self, skin: str, recommended_for: Sequence[str]) -> Tuple[int, Optional[str]]:
        """부분 피부타입 호환성 (첫 번째 일치 항목 사용)"""
        for partial in self.config.PARTIAL_SKIN_TYPE_COMPATIBILITY.get(skin, []):
            if partial in recommended_for:
                return self.config.SKIN_TYPE_PARTIAL_SCORE, f"Compatible via {partial} skin properties"
        return 0, None

    def treated_concerns(self, ingredient: Ingredient, concerns: List[str]) -> List[str]:
        """성분이 직접 또는 효능을 통해 해결하는 고민 목록"""
        treated = []
        for concern in concerns:
            if any(t and (t in concern or concern in t) for t in ingredient.treats):
                treated.append(concern)
                continue

            wanted = self.config.CONCERN_BENEFIT_MAP.get(concern, [])
            if any(benefit_matches(benefit, w) for w in wanted for benefit in ingredient.benefits):
                treated.append(concern)
        return treated
