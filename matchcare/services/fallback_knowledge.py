"""
폴백 지식 제공자
온톨로지 로드에 실패했을 때 사용할 내장 성분 지식
"""

import logging
from typing import Dict, Any

from matchcare.models.knowledge_models import Ingredient, LabeledEntity, KnowledgeGraph
from matchcare.shared.constants import KnowledgeSourceName

logger = logging.getLogger(__name__)

FALLBACK_INGREDIENTS: Dict[str, Dict[str, Any]] = {
    'hyaluronic acid': {
        'recommended_for': ['dry', 'normal', 'sensitive'],
        'treats': ['dryness', 'finelines'],
        'functions': ['humectant'],
        'benefits': ['hydrating', 'anti-aging'],
        'synergistic_with': ['niacinamide', 'ceramides', 'glycerin'],
        'incompatible_with': [],
        'efficacy_score': 95,
        'safety_rating': 10
    },
    'niacinamide': {
        'recommended_for': ['oily', 'combination', 'sensitive'],
        'treats': ['oiliness', 'largepores', 'redness'],
        'functions': ['sebum regulator', 'anti-inflammatory'],
        'benefits': ['pore minimizing', 'oil controlling'],
        'synergistic_with': ['hyaluronic acid', 'ceramides'],
        'incompatible_with': ['vitamin c'],
        'efficacy_score': 88,
        'safety_rating': 9
    },
    'salicylic acid': {
        'recommended_for': ['oily', 'combination'],
        'treats': ['acne', 'largepores', 'uneventexture'],
        'functions': ['exfoliant'],
        'benefits': ['exfoliating & renewing', 'pore minimizing'],
        'synergistic_with': [],
        'incompatible_with': ['retinol', 'vitamin c'],
        'efficacy_score': 85,
        'safety_rating': 7
    },
    'retinol': {
        'recommended_for': ['normal', 'oily'],
        'treats': ['wrinkles', 'finelines', 'acne', 'uneventexture'],
        'functions': ['cell renewal'],
        'benefits': ['anti-aging', 'exfoliating & renewing'],
        'synergistic_with': ['hyaluronic acid'],
        'incompatible_with': ['salicylic acid', 'vitamin c'],
        'efficacy_score': 95,
        'safety_rating': 5
    },
    'vitamin c': {
        'recommended_for': ['normal', 'dry'],
        'treats': ['darkspots', 'wrinkles', 'dullness'],
        'functions': ['antioxidant'],
        'benefits': ['brightening', 'anti-aging', 'protective & shielding'],
        'synergistic_with': ['vitamin e'],
        'incompatible_with': ['niacinamide', 'salicylic acid', 'retinol'],
        'efficacy_score': 92,
        'safety_rating': 6
    },
    'ceramides': {
        'recommended_for': ['dry', 'sensitive', 'normal'],
        'treats': ['dryness', 'sensitivity'],
        'functions': ['occlusive', 'emollient'],
        'benefits': ['hydrating', 'soothing & calming'],
        'synergistic_with': ['hyaluronic acid', 'niacinamide'],
        'incompatible_with': [],
        'efficacy_score': 90,
        'safety_rating': 10
    },
    'aloe vera': {
        'recommended_for': ['sensitive', 'dry', 'normal'],
        'treats': ['sensitivity', 'redness', 'dryness'],
        'functions': ['anti-inflammatory', 'humectant'],
        'benefits': ['soothing & calming', 'hydrating'],
        'synergistic_with': ['centella asiatica'],
        'incompatible_with': [],
        'efficacy_score': 75,
        'safety_rating': 10
    },
    'centella asiatica': {
        'recommended_for': ['sensitive', 'combination'],
        'treats': ['sensitivity', 'redness', 'acne'],
        'functions': ['anti-inflammatory'],
        'benefits': ['soothing & calming'],
        'synergistic_with': ['aloe vera', 'niacinamide'],
        'incompatible_with': [],
        'efficacy_score': 80,
        'safety_rating': 10
    }
}

FALLBACK_SKIN_TYPES = ['dry', 'oily', 'combination', 'sensitive', 'normal']

def _entity(key: str) -> LabeledEntity:
    return LabeledEntity(id=key, label=key.title())

def build_fallback_graph(generation: int = 0) -> KnowledgeGraph:
    """내장 지식으로 KnowledgeGraph 생성 (loaded=False)"""
    ingredients = {}
    concerns = {}
    benefits = {}
    functions = {}

    for name, data in FALLBACK_INGREDIENTS.items():
        ingredients[name] = Ingredient(
            name=name,
            label=name,
            recommended_for=tuple(sorted(data['recommended_for'])),
            treats=tuple(sorted(data['treats'])),
            functions=tuple(sorted(data['functions'])),
            benefits=tuple(sorted(data['benefits'])),
            synergistic_with=tuple(sorted(data['synergistic_with'])),
            incompatible_with=tuple(sorted(data['incompatible_with'])),
            efficacy_score=data['efficacy_score'],
            safety_rating=data['safety_rating']
        )
        for concern in data['treats']:
            concerns.setdefault(concern, _entity(concern))
        for benefit in data['benefits']:
            benefits.setdefault(benefit, _entity(benefit))
        for function in data['functions']:
            functions.setdefault(function, _entity(function))

    graph = KnowledgeGraph(
        ingredients=ingredients,
        skin_types={key: _entity(key) for key in FALLBACK_SKIN_TYPES},
        concerns=dict(sorted(concerns.items())),
        benefits=dict(sorted(benefits.items())),
        functions=dict(sorted(functions.items())),
        loaded=False,
        source=KnowledgeSourceName.FALLBACK,
        generation=generation
    )
    logger.info(f"🔄 폴백 지식 베이스 초기화: 성분 {len(ingredients)}개")
    return graph
