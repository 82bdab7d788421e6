"""
스킨케어 시맨틱 매칭 엔진
온톨로지 기반 성분 추천, 상호작용 분석, 제품 점수화
"""
from matchcare.shared.constants import SYSTEM_VERSION as __version__

__all__ = ["__version__"]
