"""
지식 그래프 데이터 모델
트리플, 성분, 분류 엔티티 등 온톨로지에서 파생되는 구조들
"""

from typing import List, Dict, Optional, Any, Tuple
from dataclasses import dataclass, field
from datetime import datetime

# === 그래프 저장소 기본 단위 ===

@dataclass(frozen=True)
class Triple:
    """주어-술어-목적어 트리플 (술어는 로컬 이름으로 저장)"""
    subject: str
    predicate: str
    obj: str

@dataclass(frozen=True)
class Edge:
    """인접 리스트의 간선"""
    predicate: str
    target: str

# === 파생 엔티티 ===

@dataclass(frozen=True)
class Ingredient:
    """
    성분 노드

    식별자는 소문자 표시 라벨이며 관계 컬렉션은 정렬된 튜플로 유지한다.
    점수 값은 항상 채워져 있다 (기본값 50 / 5 / 1.0).
    """
    name: str
    label: str
    uri: Optional[str] = None
    recommended_for: Tuple[str, ...] = ()
    treats: Tuple[str, ...] = ()
    functions: Tuple[str, ...] = ()
    benefits: Tuple[str, ...] = ()
    synergistic_with: Tuple[str, ...] = ()
    incompatible_with: Tuple[str, ...] = ()
    potentiates_effect_of: Tuple[str, ...] = ()
    efficacy_score: int = 50
    safety_rating: int = 5
    concentration: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            'name': self.name,
            'label': self.label,
            'uri': self.uri,
            'recommended_for': list(self.recommended_for),
            'treats': list(self.treats),
            'functions': list(self.functions),
            'benefits': list(self.benefits),
            'synergistic_with': list(self.synergistic_with),
            'incompatible_with': list(self.incompatible_with),
            'potentiates_effect_of': list(self.potentiates_effect_of),
            'efficacy_score': self.efficacy_score,
            'safety_rating': self.safety_rating,
            'concentration': self.concentration
        }

@dataclass(frozen=True)
class LabeledEntity:
    """피부타입, 고민, 효능, 기능 등 분류 대상"""
    id: str
    label: str
    description: str = ""
    uri: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'label': self.label,
            'description': self.description,
            'uri': self.uri
        }

@dataclass
class KnowledgeGraph:
    """
    빌드된 지식 그래프

    한 번 빌드되면 수정하지 않는다. 리로드 시 새 인스턴스로 통째로 교체된다.
    """
    ingredients: Dict[str, Ingredient] = field(default_factory=dict)
    skin_types: Dict[str, LabeledEntity] = field(default_factory=dict)
    concerns: Dict[str, LabeledEntity] = field(default_factory=dict)
    benefits: Dict[str, LabeledEntity] = field(default_factory=dict)
    functions: Dict[str, LabeledEntity] = field(default_factory=dict)
    loaded: bool = False
    source: str = ""
    generation: int = 0
    built_at: datetime = field(default_factory=datetime.now)

    @property
    def ingredient_count(self) -> int:
        return len(self.ingredients)

    def get_ingredient(self, name: str) -> Optional[Ingredient]:
        """식별자(소문자 라벨)로 성분 조회"""
        if not name:
            return None
        return self.ingredients.get(name.strip().lower())

    def sorted_ingredient_names(self) -> List[str]:
        return sorted(self.ingredients.keys())

    def benefit_label(self, benefit_id: str) -> str:
        """효능 ID의 표시 라벨 (없으면 ID 그대로)"""
        entity = self.benefits.get(benefit_id)
        return entity.label if entity else benefit_id

    def function_label(self, function_id: str) -> str:
        entity = self.functions.get(function_id)
        return entity.label if entity else function_id
