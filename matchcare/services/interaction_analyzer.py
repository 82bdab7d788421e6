"""
성분 상호작용 분석기
성분 쌍을 시너지 → 배합 금기 → 효과 증강 → 중립 순서로 분류
"""

import logging
from typing import Iterable, Optional

from matchcare.config.semantic_config import InteractionConfig
from matchcare.models.analysis_models import IngredientInteraction, InteractionResult, InteractionType
from matchcare.models.knowledge_models import Ingredient, KnowledgeGraph
from matchcare.shared.utils import unique_in_order
from matchcare.utils.ingredient_matcher import canonical_ingredient, mentions_ingredient

logger = logging.getLogger(__name__)

class InteractionAnalyzer:
    """성분 상호작용 분석"""

    def __init__(self, config: type = InteractionConfig):
        self.config = config

    def resolve(self, graph: KnowledgeGraph, name: str) -> Optional[str]:
        """
        입력 성분명을 그래프의 성분 식별자로 해석

        정확한 식별자 → 대표 성분명(동의어) → 성분명 전체를 단어로 포함하는 입력 순서로 시도한다.
        'acid' 같은 조각은 어떤 성분으로도 해석되지 않는다.
        """
        exact = graph.get_ingredient(name)
        if exact is not None:
            return exact.name
        canonical = graph.get_ingredient(canonical_ingredient(name))
        if canonical is not None:
            return canonical.name
        # 긴 성분명 우선 ('hyaluronic acid serum' → 'hyaluronic acid')
        for key in sorted(graph.ingredients, key=lambda k: (-len(k), k)):
            if mentions_ingredient(name, key):
                return key
        return None

    def analyze(self, graph: KnowledgeGraph, names: Iterable[str]) -> InteractionResult:
        """
        성분 목록의 모든 쌍에 대해 상호작용 분류

        알 수 없는 성분은 건너뛴다. 결과는 입력 순서와 무관하다.
        """
        resolved = set()
        for name in names or []:
            key = self.resolve(graph, name)
            if key is None:
                logger.debug(f"알 수 없는 성분 건너뜀: {name}")
                continue
            resolved.add(key)

        ordered = sorted(resolved)
        result = InteractionResult()
        for i in range(len(ordered)):
            for j in range(i + 1, len(ordered)):
                first = graph.ingredients[ordered[i]]
                second = graph.ingredients[ordered[j]]
                result.add(self.classify(graph, first, second))
        return result

    def classify(self, graph: KnowledgeGraph, first: Ingredient, second: Ingredient) -> IngredientInteraction:
        """두 성분의 상호작용 분류 (우선순위: 시너지 > 배합 금기 > 효과 증강 > 중립)"""
        a, b = first.name, second.name
        pair = (a, b)

        if b in first.synergistic_with or a in second.synergistic_with:
            return IngredientInteraction(
                kind=InteractionType.SYNERGISTIC,
                ingredients=pair,
                reason=self.config.SYNERGY_REASON,
                strength='high',
                benefits=unique_in_order([graph.benefit_label(benefit) for benefit in first.benefits + second.benefits]),
                functions=unique_in_order([graph.function_label(function) for function in first.functions + second.functions]),
                enhanced_efficacy=min(
                    100,
                    (first.efficacy_score + second.efficacy_score) / 2 + self.config.SYNERGY_EFFICACY_BOOST
                )
            )

        if b in first.incompatible_with or a in second.incompatible_with:
            return IngredientInteraction(
                kind=InteractionType.INCOMPATIBLE,
                ingredients=pair,
                reason=self.incompatibility_reason(a, b),
                severity=self.incompatibility_severity(a, b),
                recommendation=self.config.SEPARATION_ADVICE
            )

        if b in first.potentiates_effect_of or a in second.potentiates_effect_of:
            enhancer, enhanced = (a, b) if b in first.potentiates_effect_of else (b, a)
            return IngredientInteraction(
                kind=InteractionType.POTENTIATING,
                ingredients=pair,
                reason=self.config.POTENTIATION_REASON,
                enhancer=enhancer,
                enhanced=enhanced
            )

        return IngredientInteraction(
            kind=InteractionType.NEUTRAL,
            ingredients=pair,
            reason=self.config.NEUTRAL_REASON
        )

    def incompatibility_reason(self, a: str, b: str) -> str:
        reasons = self.config.INCOMPATIBILITY_REASONS
        return reasons.get((a, b)) or reasons.get((b, a)) or self.config.DEFAULT_INCOMPATIBILITY_REASON

    def incompatibility_severity(self, a: str, b: str) -> str:
        pair = {a, b}
        for high_pair in self.config.HIGH_SEVERITY_PAIRS:
            if pair == set(high_pair):
                return 'high'
        return 'medium'
