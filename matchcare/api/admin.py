"""
관리자 API 엔드포인트
지식 그래프 상태 확인, 리로드, 캐시 관리
"""
from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime
from typing import Any, Dict, Optional
import asyncio
import logging

from matchcare.api.dependencies import get_semantic_service
from matchcare.models.request import ReloadRequest
from matchcare.models.response import ErrorResponse, HealthResponse, ReloadResponse, StatsResponse
from matchcare.services.semantic_service import SemanticService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
    responses={
        500: {"model": ErrorResponse, "description": "서버 내부 오류"}
    }
)

@router.get("/health", response_model=HealthResponse, summary="시맨틱 엔진 상태 확인")
async def system_health(service: SemanticService = Depends(get_semantic_service)):
    """
    지식 그래프 로드 여부와 분석 방식을 확인합니다.

    온톨로지 로드에 실패해 폴백 지식을 사용 중이면 status가 degraded로 표시됩니다.
    """
    stats = service.get_stats()
    return HealthResponse(
        status="healthy" if stats['loaded'] else "degraded",
        loaded=stats['loaded'],
        method=stats['method'],
        timestamp=datetime.now()
    )

@router.get("/stats", response_model=StatsResponse, summary="지식 그래프 통계")
async def system_stats(service: SemanticService = Depends(get_semantic_service)):
    """성분/피부타입/고민 수, 분석 방식, 캐시 크기를 반환합니다."""
    return StatsResponse(**service.get_stats())

@router.post("/reload", response_model=ReloadResponse, summary="지식 그래프 리로드")
async def reload_knowledge(
    request: Optional[ReloadRequest] = None,
    service: SemanticService = Depends(get_semantic_service)
):
    """
    온톨로지를 다시 로드합니다.

    본문에 document가 있으면 인라인 문서를, 없으면 설정된 파일(1차 → 2차)을 사용합니다.
    리로드는 워커 스레드에서 실행되며 진행 중인 요청은 이전 그래프로 응답합니다.
    """
    document = request.document if request else None
    rdf_format = request.rdf_format if request else None

    try:
        result = await asyncio.to_thread(service.reload, document, rdf_format)
    except Exception as e:
        logger.error(f"지식 그래프 리로드 중 오류: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={
                "code": "RELOAD_ERROR",
                "message": "지식 그래프 리로드 중 오류가 발생했습니다",
                "details": {"error_type": type(e).__name__}
            }
        )

    graph = service.graph
    return ReloadResponse(
        loaded=result.loaded,
        source=graph.source,
        triple_count=result.triple_count,
        ingredient_count=len(graph.ingredients),
        generation=graph.generation,
        error=result.error,
        timestamp=datetime.now()
    )

@router.post("/cache/clear", summary="추론 캐시 초기화")
async def clear_cache(service: SemanticService = Depends(get_semantic_service)) -> Dict[str, Any]:
    cleared = service.clear_cache()
    return {
        "cleared_entries": cleared,
        "timestamp": datetime.now().isoformat()
    }
