"""
공유 상수 정의
시맨틱 엔진 전반에서 사용하는 고정 값들을 중앙 집중 관리
"""

# 시스템 버전 정보
SYSTEM_VERSION = "1.0.0"
ENGINE_VERSION = "2.0-semantic"

class AnalysisMethod:
    """분석 방식 표기"""
    SEMANTIC = "Semantic Ontology Reasoning"
    FALLBACK = "Rule-based Fallback"

class KnowledgeSourceName:
    """지식 소스 이름"""
    INLINE = "inline"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    FALLBACK = "fallback"

# 에러 메시지
ERROR_MESSAGES = {
    'system_error': {
        'ko': '시스템 오류가 발생했습니다. 잠시 후 다시 시도해주세요.',
        'en': 'A system error occurred. Please try again later.'
    },
    'invalid_request': {
        'ko': '잘못된 요청입니다. 입력값을 확인해주세요.',
        'en': 'Invalid request. Please check your input.'
    },
    'scoring_error': {
        'ko': '제품 점수 계산 중 오류가 발생했습니다.',
        'en': 'Failed to score the product.'
    },
    'not_found': {
        'ko': '요청한 항목을 찾을 수 없습니다.',
        'en': 'The requested item was not found.'
    }
}

def get_error_message(error_type: str, language: str = 'en') -> str:
    """에러 메시지 조회"""
    messages = ERROR_MESSAGES.get(error_type, ERROR_MESSAGES['system_error'])
    return messages.get(language, messages['en'])
