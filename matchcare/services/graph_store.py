"""
그래프 저장소
트리플을 주어별 인접 리스트와 타입 인덱스로 보관하는 일괄 적재/다중 조회 저장소
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from matchcare.models.knowledge_models import Triple, Edge

logger = logging.getLogger(__name__)

TYPE_PREDICATE = "type"

def local_name(uri: str) -> str:
    """
    URI의 로컬 이름 추출

    '#' 뒤 부분을 우선 사용하고, 없으면 마지막 '/' 뒤 부분을 사용한다.

    Example:
        >>> local_name("http://example.org/onto#Niacinamide")
        'Niacinamide'
        >>> local_name("http://example.org/onto/Niacinamide")
        'Niacinamide'
    """
    if not uri:
        return ""
    if "#" in uri:
        tail = uri.rsplit("#", 1)[1]
        if tail:
            return tail
    stripped = uri.rstrip("/")
    return stripped.rsplit("/", 1)[-1]

class GraphStore:
    """트리플 저장소 (로드 후 읽기 전용)"""

    def __init__(self):
        self._adjacency: Dict[str, List[Edge]] = {}
        self._types: Dict[str, List[str]] = {}
        self._triple_count = 0

    def load(self, triples: Iterable[Triple]) -> int:
        """
        트리플 일괄 적재 (기존 내용 교체)

        중복 트리플은 한 번만 저장되며 주어/간선 순서는 정렬되어 결정적이다.

        Returns:
            int: 저장된 트리플 수
        """
        unique = sorted(set(triples), key=lambda t: (t.subject, t.predicate, t.obj))

        adjacency: Dict[str, List[Edge]] = defaultdict(list)
        types: Dict[str, List[str]] = defaultdict(list)
        for triple in unique:
            adjacency[triple.subject].append(Edge(triple.predicate, triple.obj))
            if triple.predicate == TYPE_PREDICATE:
                types[local_name(triple.obj)].append(triple.subject)

        self._adjacency = dict(adjacency)
        self._types = dict(types)
        self._triple_count = len(unique)

        logger.debug(f"그래프 저장소 적재: {self._triple_count}개 트리플, {len(self._adjacency)}개 주어")
        return self._triple_count

    def clear(self):
        """저장소 비우기"""
        self._adjacency = {}
        self._types = {}
        self._triple_count = 0

    def edges(self, subject: str) -> List[Edge]:
        return list(self._adjacency.get(subject, []))

    def objects(self, subject: str, predicate: str) -> List[str]:
        """주어와 술어에 해당하는 목적어 목록"""
        return [e.target for e in self._adjacency.get(subject, []) if e.predicate == predicate]

    def first_object(self, subject: str, predicate: str) -> Optional[str]:
        for edge in self._adjacency.get(subject, []):
            if edge.predicate == predicate:
                return edge.target
        return None

    def subjects_of_type(self, type_name: str) -> List[str]:
        """타입(로컬 이름)으로 주어 조회"""
        return list(self._types.get(type_name, []))

    def subjects(self) -> List[str]:
        return list(self._adjacency.keys())

    def triples(self, pattern: Tuple[Optional[str], Optional[str], Optional[str]] = (None, None, None)) -> List[Triple]:
        """패턴 매칭 조회 (None은 와일드카드)"""
        s, p, o = pattern
        subjects = [s] if s is not None else self._adjacency.keys()
        result = []
        for subject in subjects:
            for edge in self._adjacency.get(subject, []):
                if p is not None and edge.predicate != p:
                    continue
                if o is not None and edge.target != o:
                    continue
                result.append(Triple(subject, edge.predicate, edge.target))
        return result

    def __len__(self) -> int:
        return self._triple_count
