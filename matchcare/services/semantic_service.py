"""
시맨틱 매칭 서비스
지식 그래프 로드/리로드, 프로필 기반 성분 추론, 제품 점수화를 묶는 서비스 계층

사용 흐름:
1. reload()로 온톨로지 로드 (실패 시 폴백 지식 사용)
2. get_semantic_recommendations()로 프로필 분석 (결과 캐시)
3. score_product() / recommend_products()로 제품 평가
"""

import dataclasses
import logging
import threading
from typing import Any, Dict, List, Optional

from matchcare.config.semantic_config import ConfidenceConfig
from matchcare.config.settings import Settings, get_settings
from matchcare.models.analysis_models import (
    InteractionResult, ProductScoreResult, Recommendation, SemanticAnalysisResult
)
from matchcare.models.knowledge_models import Ingredient, KnowledgeGraph, LabeledEntity
from matchcare.models.request import ProductRecord, UserProfile
from matchcare.services.fallback_knowledge import build_fallback_graph
from matchcare.services.graph_store import GraphStore
from matchcare.services.ingredient_recommender import IngredientRecommender
from matchcare.services.interaction_analyzer import InteractionAnalyzer
from matchcare.services.knowledge_graph_builder import KnowledgeGraphBuilder
from matchcare.services.knowledge_loader import KnowledgeLoader, KnowledgeSource, LoadResult
from matchcare.services.product_scorer import ProductScorer
from matchcare.services.reasoning_cache import ReasoningCache, build_profile_signature
from matchcare.services.safety_filter import SensitivityFilter
from matchcare.shared.constants import AnalysisMethod, KnowledgeSourceName
from matchcare.shared.utils import clamp, round_half_up
from matchcare.utils.ingredient_matcher import normalize_concerns

logger = logging.getLogger(__name__)

class SemanticService:
    """시맨틱 매칭 엔진 서비스"""

    def __init__(self, settings: Optional[Settings] = None,
                 cache: Optional[ReasoningCache] = None):
        self.settings = settings or get_settings()
        self.loader = KnowledgeLoader(self.settings.ontology_format)
        self.builder = KnowledgeGraphBuilder()
        self.recommender = IngredientRecommender()
        self.analyzer = InteractionAnalyzer()
        self.sensitivity_filter = SensitivityFilter()
        self.scorer = ProductScorer()
        self.cache = cache or ReasoningCache(
            ttl_seconds=self.settings.cache_ttl_seconds,
            max_size=self.settings.cache_max_size
        )

        self._reload_lock = threading.Lock()
        self._generation = 0
        # 첫 리로드 전까지는 폴백 지식으로 응답
        self._graph: KnowledgeGraph = build_fallback_graph(self._generation)
        self._last_load: Optional[LoadResult] = None

    # === 지식 그래프 관리 ===

    @property
    def graph(self) -> KnowledgeGraph:
        return self._graph

    @property
    def loaded(self) -> bool:
        return self._graph.loaded

    @property
    def last_load(self) -> Optional[LoadResult]:
        return self._last_load

    def _sources(self, document: Optional[str]) -> List[KnowledgeSource]:
        if document is not None:
            return [KnowledgeSource(KnowledgeSourceName.INLINE, text=document)]

        sources = []
        if self.settings.primary_ontology_path:
            sources.append(KnowledgeSource(KnowledgeSourceName.PRIMARY, path=self.settings.primary_ontology_path))
        if self.settings.secondary_ontology_path:
            sources.append(KnowledgeSource(KnowledgeSourceName.SECONDARY, path=self.settings.secondary_ontology_path))
        return sources

    def reload(self, document: Optional[str] = None, rdf_format: Optional[str] = None) -> LoadResult:
        """
        지식 그래프 리로드

        새 저장소와 그래프를 별도로 만든 뒤 참조를 교체하므로
        진행 중인 조회는 이전 그래프를 끝까지 사용한다.
        로드에 실패하거나 성분이 하나도 없으면 폴백 지식으로 교체한다.

        Args:
            document: 인라인 온톨로지 문서 (None이면 설정된 파일 사용)
            rdf_format: rdflib 포맷 이름 (None이면 설정값)
        """
        with self._reload_lock:
            generation = self._generation + 1
            logger.info(f"🔄 지식 그래프 리로드 시작 (세대 {generation})")

            store = GraphStore()
            result = self.loader.load(store, self._sources(document), rdf_format)

            if result.loaded:
                try:
                    graph = self.builder.build(store, loaded=True, source=result.source, generation=generation)
                except Exception as e:
                    logger.error(f"❌ 지식 그래프 빌드 실패 ({result.source}): {e}")
                    result = dataclasses.replace(result, loaded=False, error=f"그래프 빌드 실패: {e}")
                    graph = build_fallback_graph(generation)
                if graph.loaded and not graph.ingredients:
                    logger.warning(f"⚠️ 성분이 없는 온톨로지 ({result.source}) - 폴백 지식 사용")
                    result = dataclasses.replace(result, loaded=False, error="성분이 없는 온톨로지입니다")
                    graph = build_fallback_graph(generation)
            else:
                logger.warning("⚠️ 온톨로지 로드 실패 - 폴백 지식 사용")
                graph = build_fallback_graph(generation)

            self._graph = graph
            self._generation = generation
            self._last_load = result
            self.cache.clear()

            logger.info(
                f"✅ 지식 그래프 리로드 완료: {self.method_for(graph)}, "
                f"성분 {len(graph.ingredients)}개 (세대 {generation})"
            )
            return result

    @staticmethod
    def method_for(graph: KnowledgeGraph) -> str:
        return AnalysisMethod.SEMANTIC if graph.loaded else AnalysisMethod.FALLBACK

    # === 프로필 분석 ===

    def get_semantic_recommendations(self, profile: UserProfile) -> SemanticAnalysisResult:
        """
        프로필 기반 시맨틱 분석

        결과는 프로필 시그니처로 캐시되며 그래프 세대가 바뀌면 무효화된다.
        """
        graph = self._graph
        cache_key = build_profile_signature(profile.skin_type, profile.skin_concerns, profile.known_sensitivities)

        cached = self.cache.get(cache_key, graph.generation)
        if cached is not None:
            logger.debug(f"📋 캐시된 시맨틱 분석 사용: {cache_key}")
            return cached

        skin = getattr(profile.skin_type, 'value', profile.skin_type)
        concerns = normalize_concerns(profile.skin_concerns)
        logger.debug(f"🔍 시맨틱 추론 수행: {skin}, {concerns}")

        recommendations = self.recommender.recommend(graph, skin, concerns)
        filtered = self.sensitivity_filter.filter(recommendations, profile.known_sensitivities)
        interactions = self.analyzer.analyze(graph, [r.ingredient for r in filtered])

        result = SemanticAnalysisResult(
            recommended_ingredients=filtered,
            interactions=interactions,
            reasoning=self.generate_reasoning(graph, filtered, interactions, skin, concerns,
                                              profile.known_sensitivities),
            method=self.method_for(graph),
            confidence=self.calculate_confidence(graph, filtered, interactions, concerns),
            metadata={
                'total_ingredients': len(graph.ingredients),
                'processed_concerns': len(concerns),
                'applied_filters': len(profile.known_sensitivities),
                'filtered_out': len(recommendations) - len(filtered),
                'cache_key': cache_key,
                'source': graph.source,
                'generation': graph.generation
            }
        )

        self.cache.put(cache_key, result, graph.generation)
        return result

    def generate_reasoning(self, graph: KnowledgeGraph, recommendations: List[Recommendation],
                           interactions: InteractionResult, skin: str, concerns: List[str],
                           sensitivities: List[str]) -> List[str]:
        """분석 근거 문장 목록"""
        reasoning = [
            f"Analyzed {len(graph.ingredients)} ingredients using semantic ontology reasoning",
            f"Personalized analysis for {skin} skin with {len(concerns)} specific concerns"
        ]

        top = recommendations[:3]
        if top:
            reasoning.append(
                f"Top matches: {', '.join(r.ingredient for r in top)} "
                f"(scores: {', '.join(str(r.score) for r in top)})"
            )

        if concerns:
            addressed = self._addressed_concerns(recommendations)
            coverage_percent = round_half_up(len(addressed) / len(concerns) * 100)
            reasoning.append(f"Addresses {len(addressed)}/{len(concerns)} concerns ({coverage_percent}% coverage)")

        if interactions.synergistic:
            reasoning.append(
                f"Found {len(interactions.synergistic)} beneficial ingredient combinations for enhanced efficacy"
            )
        if interactions.incompatible:
            reasoning.append(
                f"⚠️ Detected {len(interactions.incompatible)} potential conflicts - "
                f"use timing strategies to avoid interactions"
            )

        if sensitivities:
            reasoning.append(f"Applied safety filters for {len(sensitivities)} known sensitivities")

        if graph.loaded:
            reasoning.append(
                f"Analysis powered by semantic web ontology with {len(graph.ingredients)} ingredients "
                f"and {self._relationship_count(graph)} relationships"
            )
        else:
            reasoning.append('Analysis using advanced rule-based reasoning with ingredient interaction detection')
        return reasoning

    def calculate_confidence(self, graph: KnowledgeGraph, recommendations: List[Recommendation],
                             interactions: InteractionResult, concerns: List[str]) -> int:
        """분석 신뢰도 (35-98)"""
        cfg = ConfidenceConfig
        confidence = float(cfg.BASE)

        if recommendations:
            avg_score = sum(r.score for r in recommendations) / len(recommendations)
            confidence += min(cfg.AVG_SCORE_MAX, avg_score / cfg.AVG_SCORE_DIVISOR)

        confidence += min(cfg.SYNERGY_MAX, len(interactions.synergistic) * cfg.SYNERGY_POINTS_EACH)
        confidence -= min(cfg.CONFLICT_MAX, len(interactions.incompatible) * cfg.CONFLICT_POINTS_EACH)

        if graph.loaded and len(graph.ingredients) > cfg.ONTOLOGY_MIN_INGREDIENTS:
            confidence += cfg.ONTOLOGY_BONUS

        if concerns:
            coverage = len(self._addressed_concerns(recommendations)) / len(concerns)
            confidence += round_half_up(coverage * cfg.COVERAGE_MAX)

        return int(clamp(round_half_up(confidence), cfg.MIN_CONFIDENCE, cfg.MAX_CONFIDENCE))

    @staticmethod
    def _addressed_concerns(recommendations: List[Recommendation]) -> set:
        return {concern for r in recommendations for concern in r.treats_concerns}

    @staticmethod
    def _relationship_count(graph: KnowledgeGraph) -> int:
        return sum(
            len(i.recommended_for) + len(i.treats) + len(i.functions) + len(i.benefits)
            + len(i.synergistic_with) + len(i.incompatible_with) + len(i.potentiates_effect_of)
            for i in graph.ingredients.values()
        )

    # === 상호작용 / 제품 ===

    def analyze_interactions(self, names: List[str]) -> InteractionResult:
        """임의 성분 목록의 상호작용 분석"""
        return self.analyzer.analyze(self._graph, names)

    def score_product(self, product: ProductRecord, profile: UserProfile) -> ProductScoreResult:
        """단일 제품 점수 계산"""
        analysis = self.get_semantic_recommendations(profile)
        return self.scorer.score(product, profile, analysis)

    def recommend_products(self, products: List[ProductRecord], profile: UserProfile,
                           limit: Optional[int] = None, strict_mode: bool = False) -> Dict[str, Any]:
        """
        후보 제품 목록 순위화

        민감 태그에 대응하는 *_free 플래그가 True가 아닌 제품은 미리 제외한다.
        """
        analysis = self.get_semantic_recommendations(profile)
        candidates = self.sensitivity_filter.filter_products(products, profile.known_sensitivities)
        ranked, threshold = self.scorer.rank_products(candidates, profile, analysis, limit, strict_mode)

        logger.info(f"✅ 제품 추천 생성: 후보 {len(products)}개 → 추천 {len(ranked)}개")
        return {
            'recommendations': [r.to_dict() for r in ranked],
            'semantic_analysis': {
                'method': analysis.method,
                'confidence': analysis.confidence,
                'recommended_ingredients': [r.to_dict() for r in analysis.recommended_ingredients[:8]],
                'interactions': analysis.interactions.to_dict(),
                'reasoning': list(analysis.reasoning)
            },
            'metadata': {
                'total_candidates': len(products),
                'safe_candidates': len(candidates),
                'quality_threshold': threshold,
                'strict_mode': strict_mode,
                'method': analysis.method
            }
        }

    # === 조회 ===

    def get_ingredient_info(self, name: str) -> Optional[Ingredient]:
        """성분 정보 조회 (정확한 이름 우선, 없으면 동의어 매칭)"""
        graph = self._graph
        key = self.analyzer.resolve(graph, name)
        return graph.ingredients.get(key) if key else None

    def get_skin_types(self) -> List[LabeledEntity]:
        return list(self._graph.skin_types.values())

    def get_concerns(self) -> List[LabeledEntity]:
        return list(self._graph.concerns.values())

    def get_stats(self) -> Dict[str, Any]:
        """지식 그래프/캐시 통계"""
        graph = self._graph
        return {
            'loaded': graph.loaded,
            'ingredient_count': len(graph.ingredients),
            'skin_type_count': len(graph.skin_types),
            'concern_count': len(graph.concerns),
            'method': self.method_for(graph),
            'cache_size': self.cache.size(),
            'source': graph.source,
            'generation': graph.generation
        }

    def clear_cache(self) -> int:
        """추론 캐시 비우기"""
        count = self.cache.clear()
        logger.info(f"🗑️ 추론 캐시 삭제: {count}개")
        return count
