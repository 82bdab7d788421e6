"""
시맨틱 분석 결과 모델
성분 추천, 상호작용 분석, 제품 점수 계산 결과를 담는 데이터 클래스들
"""

from typing import List, Dict, Optional, Any, Tuple
from dataclasses import dataclass, field
from enum import Enum

# === 열거형 정의 ===

class InteractionType(Enum):
    """성분 상호작용 유형"""
    SYNERGISTIC = "synergistic"      # 시너지
    INCOMPATIBLE = "incompatible"    # 배합 금기
    POTENTIATING = "potentiating"    # 효과 증강
    NEUTRAL = "neutral"              # 관계 없음

# === 성분 추천 ===

@dataclass
class ConfidenceFactor:
    """추천 신뢰도 요인"""
    factor: str
    weight: float
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {'factor': self.factor, 'weight': self.weight, 'value': self.value}

@dataclass
class Recommendation:
    """성분 추천 결과"""
    ingredient: str
    label: str
    score: int
    reasons: List[str] = field(default_factory=list)
    treats_concerns: List[str] = field(default_factory=list)
    confidence_factors: List[ConfidenceFactor] = field(default_factory=list)
    functions: List[str] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)
    efficacy_score: int = 50
    safety_rating: int = 5
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            'ingredient': self.ingredient,
            'label': self.label,
            'score': self.score,
            'reasons': list(self.reasons),
            'treats_concerns': list(self.treats_concerns),
            'confidence_factors': [f.to_dict() for f in self.confidence_factors],
            'functions': list(self.functions),
            'benefits': list(self.benefits),
            'efficacy_score': self.efficacy_score,
            'safety_rating': self.safety_rating,
            'metadata': dict(self.metadata)
        }

# === 상호작용 분석 ===

@dataclass
class IngredientInteraction:
    """두 성분 간 상호작용"""
    kind: InteractionType
    ingredients: Tuple[str, str]
    reason: str
    strength: Optional[str] = None
    severity: Optional[str] = None
    recommendation: Optional[str] = None
    enhancer: Optional[str] = None
    enhanced: Optional[str] = None
    benefits: List[str] = field(default_factory=list)
    functions: List[str] = field(default_factory=list)
    enhanced_efficacy: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """유형별로 의미 있는 필드만 포함"""
        result: Dict[str, Any] = {
            'kind': self.kind.value,
            'ingredients': list(self.ingredients),
            'reason': self.reason
        }
        if self.kind == InteractionType.SYNERGISTIC:
            result['strength'] = self.strength
            result['benefits'] = {
                'benefits': list(self.benefits),
                'functions': list(self.functions),
                'enhanced_efficacy': self.enhanced_efficacy
            }
        elif self.kind == InteractionType.INCOMPATIBLE:
            result['severity'] = self.severity
            result['recommendation'] = self.recommendation
        elif self.kind == InteractionType.POTENTIATING:
            result['enhancer'] = self.enhancer
            result['enhanced'] = self.enhanced
        return result

@dataclass
class InteractionResult:
    """상호작용 분석 결과 (유형별 분류)"""
    synergistic: List[IngredientInteraction] = field(default_factory=list)
    incompatible: List[IngredientInteraction] = field(default_factory=list)
    potentiating: List[IngredientInteraction] = field(default_factory=list)
    neutral: List[IngredientInteraction] = field(default_factory=list)

    def add(self, interaction: IngredientInteraction):
        getattr(self, interaction.kind.value).append(interaction)

    def find(self, a: str, b: str) -> Optional[IngredientInteraction]:
        """두 성분 쌍의 분류 결과 조회 (순서 무관)"""
        pair = tuple(sorted((a, b)))
        for group in (self.synergistic, self.incompatible, self.potentiating, self.neutral):
            for interaction in group:
                if tuple(sorted(interaction.ingredients)) == pair:
                    return interaction
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'synergistic': [i.to_dict() for i in self.synergistic],
            'incompatible': [i.to_dict() for i in self.incompatible],
            'potentiating': [i.to_dict() for i in self.potentiating],
            'neutral': [i.to_dict() for i in self.neutral]
        }

@dataclass
class SemanticAnalysisResult:
    """프로필 기반 시맨틱 분석 결과"""
    recommended_ingredients: List[Recommendation]
    interactions: InteractionResult
    reasoning: List[str]
    method: str
    confidence: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            'recommended_ingredients': [r.to_dict() for r in self.recommended_ingredients],
            'interactions': self.interactions.to_dict(),
            'reasoning': list(self.reasoning),
            'method': self.method,
            'confidence': self.confidence,
            'metadata': dict(self.metadata)
        }

# === 제품 점수 ===

@dataclass
class ScoreBreakdown:
    """제품 점수 세부 항목 (각 0-100)"""
    semantic_match: int = 0
    concern_coverage: int = 0
    ingredient_synergy: int = 0
    formulation_safety: int = 0
    category_relevance: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'semantic_match': self.semantic_match,
            'concern_coverage': self.concern_coverage,
            'ingredient_synergy': self.ingredient_synergy,
            'formulation_safety': self.formulation_safety,
            'category_relevance': self.category_relevance
        }

@dataclass
class ProductScoreResult:
    """제품 점수 계산 결과"""
    product_id: Optional[str]
    product_name: str
    score: int
    explanation: str
    breakdown: ScoreBreakdown
    insights: Dict[str, Any] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'product_name': self.product_name,
            'score': self.score,
            'explanation': self.explanation,
            'breakdown': self.breakdown.to_dict(),
            'insights': self.insights,
            'tags': list(self.tags)
        }

# === 예외 정의 ===

class SemanticEngineError(Exception):
    """시맨틱 엔진 기본 예외"""
    pass

class KnowledgeLoadError(SemanticEngineError):
    """지식 소스 로드 오류"""
    pass

class ScoreCalculationError(SemanticEngineError):
    """점수 계산 오류"""
    pass
