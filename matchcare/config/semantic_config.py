"""
시맨틱 추론 설정 관리
점수 가중치, 호환성 테이블, 고민-효능 매핑 등 튜닝 가능한 상수를 중앙 집중 관리

주의: 부분 피부타입 호환성 테이블과 고민→효능 테이블은 경험적으로 조정된 값이다.
보정 작업 전까지 값을 임의로 바꾸지 않는다.
"""
from typing import Dict, List, Tuple

class RecommenderConfig:
    """성분 추천 점수 설정"""

    # 구성 요소별 최대 점수
    SKIN_TYPE_MATCH_SCORE = 40
    SKIN_TYPE_PARTIAL_SCORE = 15
    CONCERN_POINTS_PER_MATCH = 25
    CONCERN_MAX_SCORE = 50
    EFFICACY_MAX_BONUS = 5
    SAFETY_MAX_BONUS = 5
    FUNCTION_MAX_BONUS = 5
    BENEFIT_MAX_BONUS = 5
    MAX_TOTAL_SCORE = 100

    # 노이즈 하한 (이 값 이하는 제외)
    NOISE_FLOOR = 25
    MAX_RECOMMENDATIONS = 15

    # 근거 문구 임계값
    HIGH_EFFICACY_THRESHOLD = 80
    EXCELLENT_SAFETY_THRESHOLD = 8

    # 신뢰도 요인 가중치
    CONFIDENCE_WEIGHTS = {
        'skin_type_match': 0.4,
        'skin_type_partial': 0.2,
        'concern_treatment': 0.5
    }
    PARTIAL_CONFIDENCE_DIVISOR = 20

    # 부분 피부타입 호환성 (복합성 피부는 구성 타입의 특성을 물려받음)
    PARTIAL_SKIN_TYPE_COMPATIBILITY: Dict[str, List[str]] = {
        'combination': ['oily', 'dry', 'normal'],
        'sensitive': ['normal', 'dry'],
        'normal': ['dry', 'sensitive'],
    }

    # 고민 → 효능 간접 매칭 테이블 (성분 추천용)
    CONCERN_BENEFIT_MAP: Dict[str, List[str]] = {
        'acne': ['pore minimizing', 'oil controlling', 'exfoliating'],
        'wrinkles': ['anti-aging', 'firming'],
        'finelines': ['anti-aging', 'hydrating'],
        'dryness': ['hydrating', 'soothing'],
        'oiliness': ['oil controlling', 'pore minimizing'],
        'darkspots': ['brightening', 'exfoliating'],
        'largepores': ['pore minimizing', 'exfoliating'],
        'redness': ['soothing & calming', 'anti-inflammatory'],
        'sensitivity': ['soothing & calming'],
    }

class InteractionConfig:
    """성분 상호작용 설정"""

    HIGH_SEVERITY_PAIRS: List[Tuple[str, str]] = [
        ('retinol', 'benzoyl peroxide'),
        ('vitamin c', 'retinol'),
        ('salicylic acid', 'retinol'),
    ]

    INCOMPATIBILITY_REASONS: Dict[Tuple[str, str], str] = {
        ('vitamin c', 'niacinamide'): 'pH level differences may reduce efficacy',
        ('retinol', 'salicylic acid'): 'Over-exfoliation and irritation risk',
        ('vitamin c', 'retinol'): 'Different pH requirements and potential irritation',
        ('benzoyl peroxide', 'retinol'): 'Chemical interaction causing ingredient breakdown',
    }

    DEFAULT_INCOMPATIBILITY_REASON = 'Potential chemical or pH interaction'
    SYNERGY_REASON = 'Ontologically defined synergy'
    POTENTIATION_REASON = "One ingredient enhances the other's effect"
    NEUTRAL_REASON = 'No defined relationship'
    SEPARATION_ADVICE = 'Use in separate routines or different times of day'

    SYNERGY_EFFICACY_BOOST = 10

class SensitivityConfig:
    """민감 성분 설정"""

    # 민감 태그 → 성분명 포함 문자열
    SENSITIVITY_MARKERS: Dict[str, List[str]] = {
        'fragrance': ['fragrance', 'essential oil', 'perfume'],
        'alcohol': ['alcohol', 'ethanol', 'denatured alcohol'],
        'silicone': ['silicone', 'dimethicone', 'cyclomethicone'],
        'sulfate': ['sulfate', 'sls', 'sodium lauryl sulfate'],
        'paraben': ['paraben', 'methylparaben', 'propylparaben'],
    }

    # 민감 태그 → (제품 속성, 감점, 안전 문구, 위험 문구)
    FORMULATION_CHECKS: Dict[str, Dict[str, object]] = {
        'fragrance': {
            'property': 'fragrance_free',
            'penalty': 25,
            'safe_label': 'Fragrance-free formulation',
            'unsafe_label': 'May contain fragrance'
        },
        'alcohol': {
            'property': 'alcohol_free',
            'penalty': 20,
            'safe_label': 'Alcohol-free formulation',
            'unsafe_label': 'May contain drying alcohols'
        },
        'silicone': {
            'property': 'silicone_free',
            'penalty': 10,
            'safe_label': 'Silicone-free formulation',
            'unsafe_label': 'Contains silicones'
        },
        'paraben': {
            'property': 'paraben_free',
            'penalty': 15,
            'safe_label': 'Paraben-free formulation',
            'unsafe_label': 'May contain parabens'
        },
        'sulfate': {
            'property': 'sulfate_free',
            'penalty': 15,
            'safe_label': 'Sulfate-free formulation',
            'unsafe_label': 'May contain sulfates'
        },
    }

class ProductScoringConfig:
    """제품 점수 설정"""

    # 가중치 (퍼센트, 합계 100)
    WEIGHTS: Dict[str, int] = {
        'semantic_match': 45,
        'concern_coverage': 25,
        'ingredient_synergy': 15,
        'formulation_safety': 10,
        'category_relevance': 5,
    }

    # 시맨틱 매칭
    TOP_RECOMMENDATIONS_CONSIDERED = 8
    POINTS_PER_INGREDIENT_CAP = 8
    INGREDIENT_SCORE_DIVISOR = 12
    SKIN_TYPE_POINTS = 10
    HIGH_EFFICACY_THRESHOLD = 85
    HIGH_EFFICACY_POINTS_EACH = 2
    HIGH_EFFICACY_MAX = 5
    SEMANTIC_RAW_CAP = 50

    # 고민 커버리지
    NO_CONCERN_SCORE = 70
    CONCERN_BASE_SCORE = 30
    CONCERN_COVERAGE_SPAN = 70
    COMPREHENSIVE_COVERAGE_RATIO = 0.8

    # 성분 시너지
    SYNERGY_BASE_SCORE = 50
    SYNERGY_BONUS = 15
    POTENTIATION_BONUS = 10
    HIGH_CONFLICT_PENALTY = 25
    MEDIUM_CONFLICT_PENALTY = 15

    # 카테고리 적합성
    CATEGORY_MATCH_BASE = 80
    CATEGORY_MISS_SCORE = 50
    CATEGORY_UNKNOWN_SKIN_SCORE = 60
    CATEGORY_RELEVANCE: Dict[str, Dict[str, object]] = {
        'dry': {
            'preferred': ['moisturizer', 'serum', 'oil', 'cream', 'hydrating', 'nourishing'],
            'bonus': 15
        },
        'oily': {
            'preferred': ['cleanser', 'toner', 'serum', 'gel', 'oil control', 'mattifying'],
            'bonus': 15
        },
        'combination': {
            'preferred': ['serum', 'moisturizer', 'toner', 'balancing', 'dual-action'],
            'bonus': 12
        },
        'sensitive': {
            'preferred': ['gentle', 'serum', 'moisturizer', 'soothing', 'calming'],
            'bonus': 15
        },
        'normal': {
            'preferred': ['serum', 'moisturizer', 'cleanser', 'maintenance', 'preventive'],
            'bonus': 10
        },
    }

    # 고민 → 효능 간접 매칭 테이블 (제품 효능 문구용)
    PRODUCT_CONCERN_BENEFIT_MAP: Dict[str, List[str]] = {
        'acne': ['acne fighter', 'pore minimizing', 'oil controlling', 'exfoliating'],
        'wrinkles': ['anti-aging', 'firming', 'line reducing'],
        'finelines': ['anti-aging', 'hydrating', 'smoothing'],
        'dryness': ['hydrating', 'moisturizing', 'nourishing'],
        'oiliness': ['oil controlling', 'mattifying', 'pore minimizing'],
        'darkspots': ['brightening', 'spot correcting', 'evening'],
        'largepores': ['pore minimizing', 'refining', 'tightening'],
        'redness': ['soothing', 'calming', 'reducing redness'],
        'sensitivity': ['soothing', 'calming', 'gentle'],
        'dullness': ['brightening', 'illuminating', 'radiance'],
        'uneventexture': ['smoothing', 'exfoliating', 'refining'],
    }

    # 설명 등급 (하한, 접두어)
    EXPLANATION_BANDS: List[Tuple[int, str]] = [
        (80, 'Excellent match'),
        (60, 'Good match'),
        (40, 'Moderate match'),
    ]
    LOWEST_BAND_LABEL = 'Limited match'
    MAX_EXPLANATION_PARTS = 4
    EMPTY_EXPLANATION = 'Basic compatibility analysis completed'

    # 추천 품질 임계값
    QUALITY_THRESHOLD = 30
    STRICT_QUALITY_THRESHOLD = 50
    DEFAULT_PRODUCT_LIMIT = 20
    MAX_TAGS = 3

class ConfidenceConfig:
    """시맨틱 신뢰도 설정"""
    BASE = 40
    AVG_SCORE_DIVISOR = 4
    AVG_SCORE_MAX = 25
    SYNERGY_POINTS_EACH = 3
    SYNERGY_MAX = 15
    CONFLICT_POINTS_EACH = 5
    CONFLICT_MAX = 15
    ONTOLOGY_BONUS = 15
    ONTOLOGY_MIN_INGREDIENTS = 10
    COVERAGE_MAX = 10
    MIN_CONFIDENCE = 35
    MAX_CONFIDENCE = 98
