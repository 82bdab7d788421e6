"""
API 의존성
애플리케이션 상태에 보관된 SemanticService를 라우트에 주입
"""
from fastapi import HTTPException, Request

from matchcare.services.semantic_service import SemanticService
from matchcare.shared.constants import get_error_message

def get_semantic_service(request: Request) -> SemanticService:
    """app.state.semantic_service 반환 (초기화 전이면 503)"""
    service = getattr(request.app.state, "semantic_service", None)
    if service is None:
        raise HTTPException(
            status_code=503,
            detail={
                "code": "SERVICE_UNAVAILABLE",
                "message": get_error_message('system_error')
            }
        )
    return service
