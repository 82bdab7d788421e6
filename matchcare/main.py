"""
FastAPI 메인 애플리케이션
스킨케어 시맨틱 매칭 API 서버
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
import logging
import time

from dotenv import load_dotenv

# .env 파일 로드
load_dotenv()

from matchcare.api.semantic import router as semantic_router
from matchcare.api.admin import router as admin_router
from matchcare.config.settings import Settings, get_settings
from matchcare.models.response import ErrorDetail, ErrorResponse
from matchcare.services.semantic_service import SemanticService
from matchcare.shared.constants import SYSTEM_VERSION, ENGINE_VERSION, get_error_message

# 로깅 설정
logging.basicConfig(
    level=getattr(logging, get_settings().log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def create_app(service: Optional[SemanticService] = None,
               settings: Optional[Settings] = None) -> FastAPI:
    """
    애플리케이션 생성

    Args:
        service: 미리 구성된 서비스 (없으면 시작 시 생성 후 온톨로지 로드)
        settings: 실행 설정 (없으면 환경 변수)
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """애플리케이션 생명주기 관리"""
        logger.info("스킨케어 시맨틱 매칭 API 서버 시작")

        if getattr(app.state, "semantic_service", None) is None:
            semantic_service = SemanticService(settings)
            result = semantic_service.reload()
            if not result.loaded:
                logger.warning(f"온톨로지 로드 실패 - 폴백 모드로 진행: {result.error}")
            app.state.semantic_service = semantic_service

        yield

        logger.info("스킨케어 시맨틱 매칭 API 서버 종료")

    app = FastAPI(
        title="스킨케어 시맨틱 매칭 API",
        description="""
    # 온톨로지 기반 스킨케어 매칭 엔진

    성분/피부타입/고민/효능 온톨로지로 지식 그래프를 구성하고,
    사용자 피부 프로필에 맞는 성분과 제품을 추론합니다.

    ## 주요 기능
    - 프로필 기반 성분 추천 (`POST /api/v1/semantic/recommendations`)
    - 성분 상호작용 분석 (`POST /api/v1/semantic/interactions`)
    - 제품 점수화 및 순위화 (`POST /api/v1/semantic/products/score`, `/products/recommend`)
    - 지식 그래프 리로드 및 캐시 관리 (`/api/v1/admin`)
    """,
        version=SYSTEM_VERSION,
        lifespan=lifespan
    )
    app.state.semantic_service = service
    app.state.settings = settings

    # CORS 미들웨어
    if settings.debug:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def timing_middleware(request: Request, call_next):
        """요청 처리 시간 측정 (X-Process-Time 헤더, 초 단위)"""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({elapsed * 1000:.1f}ms)")
        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        return response

    def _error_response(request: Request, status_code: int, error: ErrorDetail) -> JSONResponse:
        body = ErrorResponse(error=error, timestamp=datetime.now(), path=request.url.path)
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    @app.exception_handler(HTTPException)
    async def handle_http_error(request: Request, exc: HTTPException):
        logger.warning(f"⚠️ {request.method} {request.url.path} → {exc.status_code}: {exc.detail}")
        if isinstance(exc.detail, dict) and "code" in exc.detail:
            error = ErrorDetail(**exc.detail)
        else:
            error = ErrorDetail(code=f"HTTP_{exc.status_code}", message=str(exc.detail))
        return _error_response(request, exc.status_code, error)

    @app.exception_handler(ValueError)
    async def handle_value_error(request: Request, exc: ValueError):
        logger.warning(f"⚠️ 잘못된 입력값: {request.method} {request.url.path} - {exc}")
        error = ErrorDetail(
            code="INVALID_REQUEST",
            message=get_error_message('invalid_request'),
            details={"reason": str(exc)}
        )
        return _error_response(request, 400, error)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """처리되지 않은 예외는 500 + 오류 유형만 노출"""
        logger.error(f"❌ 처리되지 않은 예외: {request.method} {request.url.path} - {exc}", exc_info=True)
        error = ErrorDetail(
            code="INTERNAL_SERVER_ERROR",
            message=get_error_message('system_error'),
            details={"error_type": type(exc).__name__}
        )
        return _error_response(request, 500, error)

    app.include_router(semantic_router)
    app.include_router(admin_router)

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return {
            "message": "스킨케어 시맨틱 매칭 API",
            "version": SYSTEM_VERSION,
            "engine": ENGINE_VERSION,
            "environment": settings.environment,
            "docs": "/docs",
            "health": "/health"
        }

    @app.get("/health")
    async def health_check():
        """기본 헬스체크"""
        semantic_service = getattr(app.state, "semantic_service", None)
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "service": "skincare-semantic-matching-api",
            "version": SYSTEM_VERSION,
            "knowledge_loaded": bool(semantic_service and semantic_service.loaded)
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "matchcare.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
