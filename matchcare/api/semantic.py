"""
시맨틱 매칭 API
프로필 분석, 성분 상호작용, 제품 점수화 엔드포인트
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict, List
import logging

from matchcare.api.dependencies import get_semantic_service
from matchcare.models.analysis_models import ScoreCalculationError
from matchcare.models.request import (
    InteractionRequest, RecommendProductsRequest, ScoreProductRequest, UserProfile
)
from matchcare.models.response import ErrorResponse
from matchcare.services.semantic_service import SemanticService
from matchcare.shared.constants import get_error_message
from matchcare.utils.time_tracker import TimeTracker

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/semantic",
    tags=["semantic"],
    responses={
        422: {"description": "잘못된 요청 본문"},
        500: {"model": ErrorResponse, "description": "서버 내부 오류"}
    }
)

def _scoring_error(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={
            "code": "SCORING_ERROR",
            "message": get_error_message('scoring_error'),
            "details": {"error_type": type(e).__name__}
        }
    )

@router.post("/recommendations", summary="프로필 기반 성분 추천")
async def semantic_recommendations(
    profile: UserProfile,
    service: SemanticService = Depends(get_semantic_service)
) -> Dict[str, Any]:
    """
    피부 타입, 고민, 민감 성분을 받아 성분 추천과 상호작용 분석 결과를 반환합니다.

    - 추천 성분 (최대 15개, 점수 내림차순)
    - 추천 성분 간 상호작용 (시너지 / 배합 금기 / 효과 증강)
    - 분석 근거와 신뢰도 (35-98)
    """
    tracker = TimeTracker("semantic_recommendations").start()
    result = service.get_semantic_recommendations(profile)
    metrics = tracker.finish()
    logger.info(
        f"성분 추천 완료: {len(result.recommended_ingredients)}개 "
        f"(신뢰도 {result.confidence}, {metrics.total_ms:.2f}ms)"
    )
    return result.to_dict()

@router.post("/interactions", summary="성분 상호작용 분석")
async def ingredient_interactions(
    request: InteractionRequest,
    service: SemanticService = Depends(get_semantic_service)
) -> Dict[str, Any]:
    """성분 목록의 모든 쌍을 시너지 → 배합 금기 → 효과 증강 → 중립 순서로 분류합니다."""
    result = service.analyze_interactions(request.ingredients)
    return result.to_dict()

@router.post("/products/score", summary="단일 제품 점수")
async def score_product(
    request: ScoreProductRequest,
    service: SemanticService = Depends(get_semantic_service)
) -> Dict[str, Any]:
    """
    제품 하나를 프로필에 대해 점수화합니다.

    가중치: 시맨틱 매칭 45 / 고민 커버리지 25 / 성분 시너지 15 / 제형 안전성 10 / 카테고리 5
    """
    try:
        with TimeTracker("score_product"):
            result = service.score_product(request.product, request.profile)
    except ScoreCalculationError as e:
        logger.error(f"제품 점수 계산 실패: {request.product.product_name} - {e}")
        raise _scoring_error(e)

    return result.to_dict()

@router.post("/products/recommend", summary="후보 제품 순위화")
async def recommend_products(
    request: RecommendProductsRequest,
    service: SemanticService = Depends(get_semantic_service)
) -> Dict[str, Any]:
    """전달된 후보 제품을 점수화하고 품질 임계값(기본 30, 엄격 모드 50)을 넘는 제품만 반환합니다."""
    tracker = TimeTracker("recommend_products").start()
    result = service.recommend_products(
        request.products,
        request.profile,
        limit=request.limit,
        strict_mode=request.strict_mode
    )
    metrics = tracker.finish()
    result['metadata']['processing_time_ms'] = round(metrics.total_ms, 2)
    return result

@router.get("/ingredients/{name}", summary="성분 정보 조회")
async def ingredient_info(
    name: str,
    service: SemanticService = Depends(get_semantic_service)
) -> Dict[str, Any]:
    """성분명(또는 동의어)으로 지식 그래프의 성분 정보를 조회합니다."""
    ingredient = service.get_ingredient_info(name)
    if ingredient is None:
        logger.debug(f"알 수 없는 성분 조회: {name}")
        raise HTTPException(
            status_code=404,
            detail={
                "code": "INGREDIENT_NOT_FOUND",
                "message": get_error_message('not_found'),
                "field": "name"
            }
        )
    return ingredient.to_dict()

@router.get("/skin-types", summary="지원 피부 타입 목록")
async def skin_types(service: SemanticService = Depends(get_semantic_service)) -> List[Dict[str, Any]]:
    return [entity.to_dict() for entity in service.get_skin_types()]

@router.get("/concerns", summary="지원 피부 고민 목록")
async def concerns(service: SemanticService = Depends(get_semantic_service)) -> List[Dict[str, Any]]:
    return [entity.to_dict() for entity in service.get_concerns()]
