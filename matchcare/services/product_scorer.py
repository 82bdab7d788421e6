"""
제품 점수 계산기
시맨틱 분석 결과와 사용자 프로필로 후보 제품을 가중 다요소 점수화
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from matchcare.config.semantic_config import ProductScoringConfig, SensitivityConfig
from matchcare.models.analysis_models import (
    InteractionResult, ProductScoreResult, Recommendation, ScoreBreakdown,
    ScoreCalculationError, SemanticAnalysisResult
)
from matchcare.models.request import ProductRecord, UserProfile
from matchcare.shared.utils import clamp, round_half_up, unique_in_order
from matchcare.utils.ingredient_matcher import (
    benefit_matches, is_concern_match, is_ingredient_match, normalize_concerns
)

logger = logging.getLogger(__name__)

def _skin_value(profile: UserProfile) -> str:
    skin = profile.skin_type
    return getattr(skin, 'value', skin) or ""

class ProductScorer:
    """
    제품 점수 계산기

    가중치 (합계 100):
    - 시맨틱 성분 매칭: 45
    - 고민 커버리지: 25
    - 성분 시너지: 15
    - 제형 안전성: 10
    - 카테고리 적합성: 5
    """

    def __init__(self, config: type = ProductScoringConfig,
                 sensitivity_config: type = SensitivityConfig):
        self.config = config
        self.sensitivity_config = sensitivity_config

    def score(self, product: ProductRecord, profile: UserProfile,
              analysis: SemanticAnalysisResult) -> ProductScoreResult:
        """
        단일 제품 점수 계산

        Raises:
            ScoreCalculationError: 점수 계산 중 예상치 못한 오류
        """
        try:
            return self._score(product, profile, analysis)
        except ScoreCalculationError:
            raise
        except Exception as e:
            logger.error(f"제품 점수 계산 오류: {product.product_id} - {e}")
            raise ScoreCalculationError(f"제품 점수 계산 실패: {product.product_name}") from e

    def _score(self, product: ProductRecord, profile: UserProfile,
               analysis: SemanticAnalysisResult) -> ProductScoreResult:
        skin = _skin_value(profile)
        parts: List[str] = []
        insights: Dict[str, Any] = {}

        semantic, semantic_parts, matches, details = self.semantic_match_score(
            product, skin, analysis.recommended_ingredients
        )
        parts.extend(semantic_parts)
        insights['ontology_matches'] = matches
        insights['match_details'] = details

        concern, concern_parts, addressed = self.concern_coverage_score(product, profile.skin_concerns)
        parts.extend(concern_parts)
        insights['addressed_concerns'] = addressed

        synergy, synergy_parts, interaction_counts = self.ingredient_synergy_score(product, analysis.interactions)
        parts.extend(synergy_parts)
        insights['interactions'] = interaction_counts

        safety, safety_parts = self.formulation_safety_score(product, profile.known_sensitivities)
        parts.extend(safety_parts)

        category, category_part = self.category_relevance_score(product, skin)
        if category_part:
            parts.append(category_part)

        weights = self.config.WEIGHTS
        weighted = (
            semantic * weights['semantic_match']
            + concern * weights['concern_coverage']
            + synergy * weights['ingredient_synergy']
            + safety * weights['formulation_safety']
            + category * weights['category_relevance']
        ) / 100
        total = int(clamp(round_half_up(weighted), 0, 100))

        breakdown = ScoreBreakdown(
            semantic_match=round_half_up(semantic),
            concern_coverage=round_half_up(concern),
            ingredient_synergy=round_half_up(synergy),
            formulation_safety=round_half_up(safety),
            category_relevance=round_half_up(category)
        )

        result = ProductScoreResult(
            product_id=product.product_id,
            product_name=product.product_name,
            score=total,
            explanation=self.build_explanation(parts, total),
            breakdown=breakdown,
            insights=insights
        )
        result.tags = self.generate_tags(result)
        return result

    # === 세부 점수 ===

    def semantic_match_score(self, product: ProductRecord, skin: str,
                             recommendations: List[Recommendation]
                             ) -> Tuple[float, List[str], List[Dict[str, Any]], Dict[str, Any]]:
        """추천 성분 포함 여부, 피부타입 명시, 고효능 성분 (원점수 최대 50 → 0-100)"""
        cfg = self.config
        raw = 0.0
        explanations: List[str] = []
        matches: List[Dict[str, Any]] = []
        details: Dict[str, Any] = {}

        for rec in recommendations[:cfg.TOP_RECOMMENDATIONS_CONSIDERED]:
            if self._contains(product.key_ingredients, rec.ingredient):
                raw += min(cfg.POINTS_PER_INGREDIENT_CAP, rec.score / cfg.INGREDIENT_SCORE_DIVISOR)
                matches.append({
                    'ingredient': rec.ingredient,
                    'score': rec.score,
                    'reasons': list(rec.reasons),
                    'efficacy': rec.efficacy_score
                })

        if matches:
            explanations.append(f"Contains {len(matches)} ontology-recommended ingredients")
            details['direct_matches'] = len(matches)

        suitable = [s.strip().lower() for s in product.suitable_for_skin_types]
        if skin and skin in suitable:
            raw += cfg.SKIN_TYPE_POINTS
            explanations.append(f"Specifically formulated for {skin} skin")
            details['skin_type_match'] = True

        high_efficacy = [m for m in matches if m['efficacy'] > cfg.HIGH_EFFICACY_THRESHOLD]
        if high_efficacy:
            raw += min(cfg.HIGH_EFFICACY_MAX, len(high_efficacy) * cfg.HIGH_EFFICACY_POINTS_EACH)
            explanations.append(f"Contains {len(high_efficacy)} high-efficacy ingredients")
            details['high_efficacy_count'] = len(high_efficacy)

        raw = min(cfg.SEMANTIC_RAW_CAP, raw)
        return raw * (100 / cfg.SEMANTIC_RAW_CAP), explanations, matches, details

    def concern_coverage_score(self, product: ProductRecord,
                               concerns: Optional[Sequence[str]]) -> Tuple[float, List[str], List[str]]:
        """직접 고민 매칭 또는 효능 문구를 통한 간접 매칭 비율"""
        cfg = self.config
        user_concerns = normalize_concerns(concerns)
        if not user_concerns:
            return cfg.NO_CONCERN_SCORE, ['No specific concerns to address'], []

        addressed = []
        for concern in user_concerns:
            if any(is_concern_match(concern, c) for c in product.addresses_concerns):
                addressed.append(concern)
                continue
            wanted = cfg.PRODUCT_CONCERN_BENEFIT_MAP.get(concern, [])
            if any(benefit_matches(benefit, w) for benefit in product.provided_benefits for w in wanted):
                addressed.append(concern)

        if not addressed:
            return cfg.CONCERN_BASE_SCORE, ['Does not specifically target your concerns'], []

        ratio = len(addressed) / len(user_concerns)
        explanations = [f"Addresses {len(addressed)}/{len(user_concerns)} of your concerns"]
        if ratio >= cfg.COMPREHENSIVE_COVERAGE_RATIO:
            explanations.append('Comprehensive concern coverage')
        return cfg.CONCERN_BASE_SCORE + ratio * cfg.CONCERN_COVERAGE_SPAN, explanations, addressed

    def ingredient_synergy_score(self, product: ProductRecord,
                                 interactions: InteractionResult) -> Tuple[float, List[str], Dict[str, int]]:
        """분석된 상호작용 쌍이 제품에 모두 포함된 경우 가감점"""
        cfg = self.config
        counts = {'synergistic': 0, 'incompatible': 0, 'potentiating': 0}

        if len(product.key_ingredients) < 2:
            return cfg.SYNERGY_BASE_SCORE, ['Single key ingredient - no interaction analysis'], counts

        score = float(cfg.SYNERGY_BASE_SCORE)
        keys = product.key_ingredients

        for synergy in interactions.synergistic:
            if all(self._contains(keys, name) for name in synergy.ingredients):
                counts['synergistic'] += 1
                score += cfg.SYNERGY_BONUS

        for potentiation in interactions.potentiating:
            if self._contains(keys, potentiation.enhancer) and self._contains(keys, potentiation.enhanced):
                counts['potentiating'] += 1
                score += cfg.POTENTIATION_BONUS

        for conflict in interactions.incompatible:
            if all(self._contains(keys, name) for name in conflict.ingredients):
                counts['incompatible'] += 1
                score -= cfg.HIGH_CONFLICT_PENALTY if conflict.severity == 'high' else cfg.MEDIUM_CONFLICT_PENALTY

        explanations = []
        if counts['synergistic']:
            explanations.append(f"{counts['synergistic']} beneficial ingredient synergies")
        if counts['potentiating']:
            explanations.append(f"{counts['potentiating']} ingredient enhancement effects")
        if counts['incompatible']:
            explanations.append(f"⚠️ {counts['incompatible']} potential ingredient conflicts")
        if not any(counts.values()):
            explanations.append('No significant ingredient interactions detected')

        return clamp(score, 0, 100), explanations, counts

    def formulation_safety_score(self, product: ProductRecord,
                                 sensitivities: Optional[Sequence[str]]) -> Tuple[float, List[str]]:
        """민감 태그별로 *_free 플래그가 True가 아니면 감점"""
        tags = unique_in_order(s.strip().lower() for s in sensitivities or [] if s and s.strip())
        if not tags:
            return 100, ['No known sensitivities to check']

        score = 100
        explanations = []
        for tag in tags:
            check = self.sensitivity_config.FORMULATION_CHECKS.get(tag)
            if not check:
                continue
            if getattr(product, check['property']) is True:
                explanations.append(f"✓ {check['safe_label']}")
            else:
                score -= check['penalty']
                explanations.append(f"⚠️ {check['unsafe_label']}")
        return max(0, score), explanations

    def category_relevance_score(self, product: ProductRecord, skin: str) -> Tuple[float, Optional[str]]:
        """피부타입별 선호 카테고리 키워드 포함 여부"""
        cfg = self.config
        relevance = cfg.CATEGORY_RELEVANCE.get(skin)
        if not relevance:
            return cfg.CATEGORY_UNKNOWN_SKIN_SCORE, None

        fields = [
            (product.main_category or "").lower(),
            (product.subcategory or "").lower(),
            (product.product_name or "").lower()
        ]
        relevant = any(keyword in text for keyword in relevance['preferred'] for text in fields)
        if relevant:
            return cfg.CATEGORY_MATCH_BASE + relevance['bonus'], f"Suitable category for {skin} skin"
        return cfg.CATEGORY_MISS_SCORE, None

    # === 설명 / 태그 ===

    def build_explanation(self, parts: List[str], total_score: int) -> str:
        """상위 4개 설명을 ' • '로 연결하고 점수 등급 접두어 부여"""
        cfg = self.config
        filtered = [p for p in parts if p and p.strip()][:cfg.MAX_EXPLANATION_PARTS]
        body = ' • '.join(filtered) if filtered else cfg.EMPTY_EXPLANATION

        label = cfg.LOWEST_BAND_LABEL
        for lower_bound, band_label in cfg.EXPLANATION_BANDS:
            if total_score >= lower_bound:
                label = band_label
                break
        return f"{label}: {body}"

    def generate_tags(self, result: ProductScoreResult) -> List[str]:
        """점수/인사이트 기반 태그 (최대 3개)"""
        tags = []
        if result.score >= 85:
            tags.append('Perfect Match')
        elif result.score >= 70:
            tags.append('Great Match')
        elif result.score >= 55:
            tags.append('Good Match')

        insights = result.insights
        interactions = insights.get('interactions', {})
        if insights.get('ontology_matches'):
            tags.append('Semantic Recommended')
        if interactions.get('synergistic', 0) > 0:
            tags.append('Synergistic Formula')
        if interactions.get('incompatible', 0) > 0:
            tags.append('Interaction Warning')

        breakdown = result.breakdown
        if breakdown.semantic_match > 80:
            tags.append('AI Recommended')
        if breakdown.concern_coverage > 85:
            tags.append('Targets Your Concerns')
        if breakdown.formulation_safety > 95:
            tags.append('Sensitivity Safe')

        return tags[:self.config.MAX_TAGS]

    # === 제품 순위 ===

    def rank_products(self, products: List[ProductRecord], profile: UserProfile,
                      analysis: SemanticAnalysisResult, limit: Optional[int] = None,
                      strict_mode: bool = False) -> Tuple[List[ProductScoreResult], int]:
        """
        후보 제품 점수화 후 품질 임계값 초과 제품만 순위화

        점수 계산에 실패한 제품은 로그를 남기고 건너뛴다.

        Returns:
            (순위 결과, 적용된 품질 임계값)
        """
        cfg = self.config
        threshold = cfg.STRICT_QUALITY_THRESHOLD if strict_mode else cfg.QUALITY_THRESHOLD
        limit = limit or cfg.DEFAULT_PRODUCT_LIMIT

        scored = []
        for product in products:
            try:
                scored.append(self.score(product, profile, analysis))
            except ScoreCalculationError as e:
                logger.warning(f"제품 점수 계산 건너뜀: {product.product_name} - {e}")

        ranked = [r for r in scored if r.score > threshold]
        ranked.sort(key=lambda r: (-r.score, r.product_name, r.product_id or ""))
        logger.debug(f"제품 순위: 후보 {len(products)}개 → 임계값({threshold}) 통과 {len(ranked)}개")
        return ranked[:limit], threshold

    @staticmethod
    def _contains(key_ingredients: Sequence[str], name: Optional[str]) -> bool:
        return any(is_ingredient_match(ingredient, name) for ingredient in key_ingredients)
