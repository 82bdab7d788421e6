"""
지식 로더
온톨로지 문서(기본 Turtle)를 rdflib로 파싱해 그래프 저장소에 적재
소스는 순서대로 시도하며, 모두 실패해도 예외를 던지지 않는다
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rdflib import Graph

from matchcare.models.knowledge_models import Triple
from matchcare.models.analysis_models import KnowledgeLoadError
from matchcare.services.graph_store import GraphStore, local_name

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "turtle"

@dataclass
class KnowledgeSource:
    """지식 소스 (파일 경로 또는 인라인 문서)"""
    name: str
    path: Optional[str] = None
    text: Optional[str] = None

    def read(self) -> str:
        if self.text is not None:
            return self.text
        if not self.path:
            raise KnowledgeLoadError(f"{self.name}: 경로가 지정되지 않았습니다")
        file_path = Path(self.path)
        if not file_path.is_file():
            raise KnowledgeLoadError(f"{self.name}: 파일을 찾을 수 없습니다 ({self.path})")
        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise KnowledgeLoadError(f"{self.name}: 파일 읽기 실패 ({e})") from e

@dataclass
class LoadResult:
    """로드 결과"""
    loaded: bool
    source: Optional[str] = None
    triple_count: int = 0
    error: Optional[str] = None
    attempted: List[str] = field(default_factory=list)

class KnowledgeLoader:
    """온톨로지 문서 로더"""

    def __init__(self, rdf_format: str = DEFAULT_FORMAT):
        self.rdf_format = rdf_format or DEFAULT_FORMAT

    def parse_document(self, text: str, rdf_format: Optional[str] = None) -> List[Triple]:
        """
        문서를 트리플 목록으로 파싱

        술어는 로컬 이름으로 정규화한다 (rdf:type → 'type', rdfs:label → 'label').

        Raises:
            KnowledgeLoadError: 빈 문서이거나 파싱에 실패한 경우
        """
        fmt = rdf_format or self.rdf_format
        if text is None or not text.strip():
            raise KnowledgeLoadError("빈 문서입니다")

        graph = Graph()
        try:
            graph.parse(data=text, format=fmt)
        except Exception as e:
            raise KnowledgeLoadError(f"{fmt} 파싱 실패: {e}") from e

        triples = [
            Triple(str(s), local_name(str(p)), str(o))
            for s, p, o in graph
        ]
        if not triples:
            raise KnowledgeLoadError("트리플이 없는 문서입니다")
        return triples

    def load(self, store: GraphStore, sources: List[KnowledgeSource],
             rdf_format: Optional[str] = None) -> LoadResult:
        """
        소스를 순서대로 시도해 첫 번째 성공한 소스로 저장소를 채움

        Args:
            store: 적재 대상 그래프 저장소 (항상 비운 뒤 채움)
            sources: 시도할 소스 목록
            rdf_format: 문서 포맷 (None이면 로더 기본값)

        Returns:
            LoadResult: 모든 소스가 실패하면 loaded=False
        """
        store.clear()
        attempted: List[str] = []
        last_error: Optional[str] = None

        for source in sources:
            attempted.append(source.name)
            try:
                text = source.read()
                triples = self.parse_document(text, rdf_format)
            except KnowledgeLoadError as e:
                last_error = str(e)
                logger.warning(f"⚠️ 지식 소스 로드 실패 ({source.name}): {e}")
                continue

            count = store.load(triples)
            logger.info(f"✅ 지식 소스 로드 완료: {source.name} ({count}개 트리플)")
            return LoadResult(loaded=True, source=source.name, triple_count=count, attempted=attempted)

        logger.error(f"❌ 모든 지식 소스 로드 실패: {attempted}")
        return LoadResult(loaded=False, error=last_error, attempted=attempted)
