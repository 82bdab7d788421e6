"""
환경 설정
환경 변수(.env 포함)에서 실행 설정을 읽어온다
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import os

# 패키지에 포함된 기본 온톨로지 경로
DEFAULT_ONTOLOGY_DIR = Path(__file__).resolve().parent.parent / "data" / "ontology"
DEFAULT_PRIMARY_ONTOLOGY = DEFAULT_ONTOLOGY_DIR / "skincareOntology_enhanced.ttl"
DEFAULT_SECONDARY_ONTOLOGY = DEFAULT_ONTOLOGY_DIR / "skincareOntology.ttl"

def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default

def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() == "true"

@dataclass
class Settings:
    """시맨틱 엔진 실행 설정"""
    primary_ontology_path: Optional[str] = str(DEFAULT_PRIMARY_ONTOLOGY)
    secondary_ontology_path: Optional[str] = str(DEFAULT_SECONDARY_ONTOLOGY)
    ontology_format: str = "turtle"

    # 추론 캐시
    cache_ttl_seconds: int = 3600
    cache_max_size: int = 1000

    # 실행 환경
    log_level: str = "INFO"
    debug: bool = False
    environment: str = "development"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @classmethod
    def from_env(cls) -> "Settings":
        """환경 변수에서 설정 생성"""
        origins = os.getenv("MATCHCARE_CORS_ORIGINS")
        return cls(
            primary_ontology_path=os.getenv("MATCHCARE_ONTOLOGY_PATH", str(DEFAULT_PRIMARY_ONTOLOGY)),
            secondary_ontology_path=os.getenv("MATCHCARE_ONTOLOGY_FALLBACK_PATH", str(DEFAULT_SECONDARY_ONTOLOGY)),
            ontology_format=os.getenv("MATCHCARE_ONTOLOGY_FORMAT", "turtle"),
            cache_ttl_seconds=_env_int("MATCHCARE_CACHE_TTL_SECONDS", 3600),
            cache_max_size=_env_int("MATCHCARE_CACHE_MAX_SIZE", 1000),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            debug=_env_bool("DEBUG"),
            environment=os.getenv("ENVIRONMENT", "development"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else ["http://localhost:3000"]
        )

_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """설정 인스턴스 반환 (최초 호출 시 환경 변수에서 생성)"""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
