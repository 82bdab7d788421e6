"""
응답 모델 정의
"""
from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime

class ErrorDetail(BaseModel):
    """에러 상세 정보"""
    code: str
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

class ErrorResponse(BaseModel):
    """에러 응답"""
    error: ErrorDetail
    timestamp: datetime
    path: str

class StatsResponse(BaseModel):
    """지식 그래프 통계"""
    loaded: bool
    ingredient_count: int
    skin_type_count: int
    concern_count: int
    method: str
    cache_size: int
    source: Optional[str] = None
    generation: int = 0

class ReloadResponse(BaseModel):
    """리로드 결과"""
    loaded: bool
    source: str
    triple_count: int
    ingredient_count: int
    generation: int
    error: Optional[str] = None
    timestamp: datetime

class HealthResponse(BaseModel):
    """헬스체크 응답"""
    status: str
    loaded: bool
    method: str
    timestamp: datetime
