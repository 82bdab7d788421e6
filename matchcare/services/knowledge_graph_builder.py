"""
지식 그래프 빌더
그래프 저장소의 트리플에서 성분/피부타입/고민/효능/기능 맵을 파생
"""

import logging
import math
from collections import defaultdict
from typing import Dict, Optional, Set

from matchcare.models.knowledge_models import Ingredient, LabeledEntity, KnowledgeGraph
from matchcare.services.graph_store import GraphStore, local_name
from matchcare.shared.utils import clamp, round_half_up

logger = logging.getLogger(__name__)

INGREDIENT_TYPES = ("Ingredient", "KeyIngredient")

# 술어 → 성분 속성 (대상을 소문자 로컬 이름으로 저장)
CLASSIFICATION_PREDICATES = {
    'recommendedFor': 'recommended_for',
    'treats': 'treats',
    'hasFunction': 'functions',
    'provides': 'benefits',
}

# 술어 → 성분 속성 (대상을 성분 식별자로 해석)
INGREDIENT_RELATION_PREDICATES = {
    'synergisticWith': 'synergistic_with',
    'incompatibleWith': 'incompatible_with',
    'potentiatesEffectOf': 'potentiates_effect_of',
}

# 분류 엔티티 타입 → KnowledgeGraph 속성
ENTITY_TYPES = {
    'SkinType': 'skin_types',
    'SkinConcern': 'concerns',
    'Benefit': 'benefits',
    'Function': 'functions',
}

DEFAULT_EFFICACY = 50
DEFAULT_SAFETY = 5
DEFAULT_CONCENTRATION = 1.0

def _parse_number(value: Optional[str]) -> Optional[float]:
    """숫자 리터럴 파싱 (NaN, 무한대, 잘못된 값은 None)"""
    if value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None

def _parse_int(value: Optional[str], default: int, lower: int, upper: int) -> int:
    parsed = _parse_number(value)
    if parsed is None:
        return default
    return int(clamp(round_half_up(parsed), lower, upper))

def _parse_float(value: Optional[str], default: float) -> float:
    parsed = _parse_number(value)
    if parsed is None or parsed < 0:
        return default
    return parsed

class KnowledgeGraphBuilder:
    """그래프 저장소 → KnowledgeGraph 변환기"""

    def build(self, store: GraphStore, loaded: bool = True, source: str = "",
              generation: int = 0) -> KnowledgeGraph:
        """
        지식 그래프 빌드

        같은 라벨을 가진 성분 주어들은 하나의 성분으로 병합된다.
        결과는 입력 트리플에 대해 결정적이다.
        """
        ingredient_subjects = sorted({
            subject
            for type_name in INGREDIENT_TYPES
            for subject in store.subjects_of_type(type_name)
        })

        # 1차: 주어 URI → 성분 식별자
        identity: Dict[str, str] = {}
        labels: Dict[str, str] = {}
        for subject in ingredient_subjects:
            label = (store.first_object(subject, 'label') or local_name(subject)).strip()
            key = label.lower()
            if not key:
                logger.debug(f"라벨 없는 성분 건너뜀: {subject}")
                continue
            identity[subject] = key
            labels.setdefault(key, label)

        # 2차: 관계 및 점수 집계
        relations: Dict[str, Dict[str, Set[str]]] = defaultdict(lambda: defaultdict(set))
        scalars: Dict[str, Dict[str, str]] = defaultdict(dict)
        uris: Dict[str, str] = {}

        for subject, key in identity.items():
            uris.setdefault(key, subject)
            for edge in store.edges(subject):
                if edge.predicate in CLASSIFICATION_PREDICATES:
                    target = local_name(edge.target).lower()
                    if target:
                        relations[key][CLASSIFICATION_PREDICATES[edge.predicate]].add(target)
                elif edge.predicate in INGREDIENT_RELATION_PREDICATES:
                    target = identity.get(edge.target) or local_name(edge.target).lower()
                    if target and target != key:
                        relations[key][INGREDIENT_RELATION_PREDICATES[edge.predicate]].add(target)
                elif edge.predicate in ('efficacyScore', 'safetyRating', 'concentration'):
                    scalars[key].setdefault(edge.predicate, edge.target)

        ingredients: Dict[str, Ingredient] = {}
        for key in sorted(labels):
            rel = relations[key]
            values = scalars[key]
            ingredients[key] = Ingredient(
                name=key,
                label=labels[key],
                uri=uris.get(key),
                recommended_for=tuple(sorted(rel['recommended_for'])),
                treats=tuple(sorted(rel['treats'])),
                functions=tuple(sorted(rel['functions'])),
                benefits=tuple(sorted(rel['benefits'])),
                synergistic_with=tuple(sorted(rel['synergistic_with'])),
                incompatible_with=tuple(sorted(rel['incompatible_with'])),
                potentiates_effect_of=tuple(sorted(rel['potentiates_effect_of'])),
                efficacy_score=_parse_int(values.get('efficacyScore'), DEFAULT_EFFICACY, 0, 100),
                safety_rating=_parse_int(values.get('safetyRating'), DEFAULT_SAFETY, 0, 10),
                concentration=_parse_float(values.get('concentration'), DEFAULT_CONCENTRATION)
            )

        graph = KnowledgeGraph(
            ingredients=ingredients,
            loaded=loaded,
            source=source,
            generation=generation
        )
        for type_name, attr in ENTITY_TYPES.items():
            setattr(graph, attr, self._build_entities(store, type_name))

        logger.info(
            f"지식 그래프 빌드 완료: 성분 {len(graph.ingredients)}개, "
            f"피부타입 {len(graph.skin_types)}개, 고민 {len(graph.concerns)}개, "
            f"효능 {len(graph.benefits)}개, 기능 {len(graph.functions)}개"
        )
        return graph

    def _build_entities(self, store: GraphStore, type_name: str) -> Dict[str, LabeledEntity]:
        entities: Dict[str, LabeledEntity] = {}
        for subject in sorted(store.subjects_of_type(type_name)):
            name = local_name(subject)
            key = name.lower()
            if not key or key in entities:
                continue
            entities[key] = LabeledEntity(
                id=key,
                label=store.first_object(subject, 'label') or name,
                description=store.first_object(subject, 'comment') or "",
                uri=subject
            )
        return entities
