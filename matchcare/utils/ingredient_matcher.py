"""
성분/고민 이름 매칭 유틸리티
성분 동의어, 고민 정규화, 효능 문구 비교를 한 곳에서 처리
"""
import re
from typing import Dict, Iterable, List, Optional

# 대표 성분명 → 동의어 (INCI 명칭, 약칭 등)
INGREDIENT_SYNONYMS: Dict[str, List[str]] = {
    'hyaluronic acid': ['sodium hyaluronate', 'hyaluronate', 'ha'],
    'vitamin c': ['ascorbic acid', 'l-ascorbic acid', 'magnesium ascorbyl phosphate',
                  'sodium ascorbyl phosphate', 'ascorbyl glucoside'],
    'vitamin e': ['tocopherol', 'tocopheryl acetate', 'mixed tocopherols'],
    'salicylic acid': ['bha', 'beta hydroxy acid', 'willow bark extract'],
    'glycolic acid': ['aha', 'alpha hydroxy acid'],
    'retinol': ['retinyl palmitate', 'retinyl acetate', 'retinaldehyde', 'retinyl linoleate'],
    'niacinamide': ['nicotinamide', 'vitamin b3'],
    'ceramides': ['ceramide np', 'ceramide ns', 'ceramide ap', 'ceramide eop'],
    'centella asiatica': ['centella', 'cica', 'tiger grass'],
    'tea tree oil': ['melaleuca alternifolia', 'tea tree', 'melaleuca oil'],
}

_NON_ALNUM = re.compile(r'[^a-z0-9]+')
_CONCERN_SEPARATORS = re.compile(r'[_\s]+')

def normalize_name(name: Optional[str]) -> str:
    """소문자 + 공백 정리"""
    if not name:
        return ""
    return " ".join(name.lower().split())

def normalize_concern(concern: Optional[str]) -> str:
    """고민 정규화: 소문자, 밑줄/공백 제거 (예: 'Large Pores' → 'largepores')"""
    if not concern:
        return ""
    return _CONCERN_SEPARATORS.sub('', concern.lower())

def normalize_concerns(concerns: Optional[Iterable[str]]) -> List[str]:
    """고민 목록 정규화 (빈 값 제거, 순서 유지 중복 제거)"""
    result: List[str] = []
    for concern in concerns or []:
        normalized = normalize_concern(concern)
        if normalized and normalized not in result:
            result.append(normalized)
    return result

def compact(text: Optional[str]) -> str:
    """비교용 압축 문자열: 소문자 영숫자만 남김 ('Soothing & Calming' → 'soothingcalming')"""
    if not text:
        return ""
    return _NON_ALNUM.sub('', text.lower())

def _contains_term(text: str, term: str) -> bool:
    """단어 경계 기준 포함 여부 ('ha'가 'hydrating' 안에서 매칭되지 않도록)"""
    return re.search(rf'(?<![a-z0-9]){re.escape(term)}(?![a-z0-9])', text) is not None

def _mentions(text: str, main: str, variants: List[str]) -> bool:
    return _contains_term(text, main) or any(_contains_term(text, v) for v in variants)

def is_ingredient_match(product_ingredient: Optional[str], ontology_ingredient: Optional[str]) -> bool:
    """
    제품 성분명과 온톨로지 성분명 매칭

    1. 직접 포함 (양방향 부분 문자열)
    2. 동의어 테이블: 양쪽 모두 같은 대표 성분을 언급하면 매칭

    빈 문자열은 어떤 것과도 매칭되지 않는다.
    """
    prod = normalize_name(product_ingredient)
    onto = normalize_name(ontology_ingredient)
    if not prod or not onto:
        return False

    if prod in onto or onto in prod:
        return True

    for main, variants in INGREDIENT_SYNONYMS.items():
        if _mentions(prod, main, variants) and _mentions(onto, main, variants):
            return True

    return False

def mentions_ingredient(text: Optional[str], ingredient: Optional[str]) -> bool:
    """text가 성분명 전체를 단어 단위로 포함하는지 ('Niacinamide 5%' → 'niacinamide', 'acid' → 없음)"""
    t = normalize_name(text)
    name = normalize_name(ingredient)
    if not t or not name:
        return False
    return _contains_term(t, name)

def canonical_ingredient(name: Optional[str]) -> Optional[str]:
    """동의어를 대표 성분명으로 변환 (해당 없으면 None)"""
    text = normalize_name(name)
    if not text:
        return None
    for main, variants in INGREDIENT_SYNONYMS.items():
        if _mentions(text, main, variants):
            return main
    return None

def is_concern_match(user_concern: Optional[str], product_concern: Optional[str]) -> bool:
    """정규화된 고민 문자열의 양방향 포함 여부"""
    user = normalize_concern(user_concern)
    product = normalize_concern(product_concern)
    if not user or not product:
        return False
    return user in product or product in user

def benefit_matches(candidate: Optional[str], wanted: Optional[str]) -> bool:
    """효능 비교: 공백/구두점을 무시하고 candidate가 wanted를 포함하는지"""
    c = compact(candidate)
    w = compact(wanted)
    if not c or not w:
        return False
    return w in c
