"""
요청 모델 정의
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from enum import Enum

class SkinType(str, Enum):
    """피부 타입"""
    DRY = "dry"
    OILY = "oily"
    COMBINATION = "combination"
    SENSITIVE = "sensitive"
    NORMAL = "normal"

class CamelModel(BaseModel):
    """snake_case 필드에 camelCase 별칭을 함께 허용하는 기본 모델"""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

def _clean_list(values: Optional[List[str]]) -> List[str]:
    if not values:
        return []
    return [v.strip() for v in values if v and v.strip()]

class UserProfile(CamelModel):
    """사용자 피부 프로필"""
    skin_type: SkinType = Field(..., description="피부 타입")
    skin_concerns: List[str] = Field(default_factory=list, description="피부 고민 (acne, wrinkles, dryness, etc.)")
    known_sensitivities: List[str] = Field(default_factory=list, description="민감 성분 (fragrance, alcohol, etc.)")

    @field_validator('skin_type', mode='before')
    @classmethod
    def normalize_skin_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('skin_concerns', 'known_sensitivities', mode='before')
    @classmethod
    def normalize_lists(cls, v):
        if v is None:
            return []
        return v

    @field_validator('skin_concerns', 'known_sensitivities')
    @classmethod
    def strip_entries(cls, v):
        return _clean_list(v)

class ProductRecord(CamelModel):
    """카탈로그에서 전달되는 제품 레코드"""
    product_id: Optional[str] = Field(None, description="제품 ID")
    product_name: str = Field(..., min_length=1, description="제품명")
    brand: Optional[str] = Field(None, description="브랜드")
    main_category: Optional[str] = Field(None, description="대분류")
    subcategory: Optional[str] = Field(None, description="소분류")
    key_ingredients: List[str] = Field(default_factory=list, description="주요 성분")
    suitable_for_skin_types: List[str] = Field(default_factory=list, description="적합 피부 타입")
    addresses_concerns: List[str] = Field(default_factory=list, description="대응 고민")
    provided_benefits: List[str] = Field(default_factory=list, description="제공 효능")
    alcohol_free: Optional[bool] = None
    fragrance_free: Optional[bool] = None
    paraben_free: Optional[bool] = None
    sulfate_free: Optional[bool] = None
    silicone_free: Optional[bool] = None
    fungal_acne_free: Optional[bool] = None

    @field_validator('product_id', mode='before')
    @classmethod
    def coerce_product_id(cls, v):
        if v is None:
            return v
        return str(v)

    @field_validator('key_ingredients', 'suitable_for_skin_types', 'addresses_concerns', 'provided_benefits', mode='before')
    @classmethod
    def normalize_lists(cls, v):
        if v is None:
            return []
        return v

class InteractionRequest(CamelModel):
    """성분 상호작용 분석 요청"""
    ingredients: List[str] = Field(..., min_length=1, description="분석할 성분명 목록")

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v):
        cleaned = _clean_list(v)
        if not cleaned:
            raise ValueError('최소 하나의 성분명이 필요합니다')
        return cleaned

class ScoreProductRequest(CamelModel):
    """단일 제품 점수 요청"""
    product: ProductRecord
    profile: UserProfile

class RecommendProductsRequest(CamelModel):
    """후보 제품 순위 요청"""
    profile: UserProfile
    products: List[ProductRecord] = Field(default_factory=list, description="후보 제품 목록")
    limit: int = Field(20, ge=1, le=100, description="반환 개수 (1-100)")
    strict_mode: bool = Field(False, description="엄격 품질 모드 (임계값 50)")

class ReloadRequest(CamelModel):
    """지식 그래프 리로드 요청"""
    document: Optional[str] = Field(None, description="인라인 온톨로지 문서 (없으면 설정된 파일 사용)")
    rdf_format: Optional[str] = Field(None, description="rdflib 포맷 이름 (기본 turtle)")
