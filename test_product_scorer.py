"""
제품 점수 계산 테스트
세부 점수, 설명 등급, 태그, 후보 제품 순위화
"""
import pytest

from matchcare.config.semantic_config import ProductScoringConfig
from matchcare.models.analysis_models import ScoreCalculationError
from matchcare.models.request import ProductRecord, UserProfile
from matchcare.services.product_scorer import ProductScorer

ALL_SENSITIVITIES = ["fragrance", "alcohol", "silicone", "paraben", "sulfate"]

def _product(name: str, **kwargs) -> ProductRecord:
    return ProductRecord(product_name=name, **kwargs)

@pytest.fixture
def scorer():
    return ProductScorer()

@pytest.fixture
def acne_toner():
    return _product(
        "Acne Toner",
        product_id="p-003",
        main_category="Toner",
        key_ingredients=["Salicylic Acid", "Niacinamide"],
        suitable_for_skin_types=["oily"],
        addresses_concerns=["acne", "large pores"]
    )

@pytest.fixture
def plain_balm():
    return _product("Plain Balm", product_id="p-002", main_category="Balm", key_ingredients=["Petrolatum"])

@pytest.fixture
def gentle_cream():
    return _product(
        "Gentle Cream",
        product_id="p-004",
        main_category="Cream",
        key_ingredients=["Glycerin"],
        suitable_for_skin_types=["oily"]
    )

def test_weights_sum_to_100():
    assert sum(ProductScoringConfig.WEIGHTS.values()) == 100

# === 단일 제품 점수 ===

def test_score_serum_for_sensitive_oily(service, serum_product, sensitive_oily_profile):
    result = service.score_product(serum_product, sensitive_oily_profile)

    assert result.breakdown.to_dict() == {
        "semantic_match": 40,
        "concern_coverage": 65,
        "ingredient_synergy": 50,
        "formulation_safety": 100,
        "category_relevance": 95,
    }
    assert result.score == 57
    assert result.explanation == (
        "Moderate match: Contains 1 ontology-recommended ingredients • "
        "Specifically formulated for oily skin • Contains 1 high-efficacy ingredients • "
        "Addresses 1/2 of your concerns"
    )
    assert result.tags == ["Good Match", "Semantic Recommended", "Sensitivity Safe"]
    assert result.insights["addressed_concerns"] == ["acne"]
    assert [m["ingredient"] for m in result.insights["ontology_matches"]] == ["niacinamide"]

def test_score_acne_toner(service, acne_toner, oily_profile):
    result = service.score_product(acne_toner, oily_profile)

    assert result.breakdown.semantic_match == 56
    assert result.breakdown.concern_coverage == 100
    assert result.breakdown.category_relevance == 95
    assert result.score == 72
    assert result.explanation.startswith("Good match: ")
    assert result.tags == ["Great Match", "Semantic Recommended", "Targets Your Concerns"]

def test_score_is_within_bounds(service, serum_product, acne_toner, plain_balm, gentle_cream):
    profiles = [
        UserProfile(skin_type=skin, skin_concerns=["acne", "dryness"], known_sensitivities=ALL_SENSITIVITIES)
        for skin in ("oily", "dry", "normal", "combination", "sensitive")
    ]
    for profile in profiles:
        for product in (serum_product, acne_toner, plain_balm, gentle_cream):
            result = service.score_product(product, profile)
            assert 0 <= result.score <= 100
            for value in result.breakdown.to_dict().values():
                assert 0 <= value <= 100
            assert len(result.tags) <= 3

# === 세부 점수 ===

def test_all_sensitivities_without_flags(scorer):
    product = _product("Mystery Cream")

    score, parts = scorer.formulation_safety_score(product, ALL_SENSITIVITIES)

    assert score == 15
    assert parts[0] == "⚠️ May contain fragrance"
    assert len(parts) == 5

def test_safety_explicit_flags(scorer):
    safe = _product("Safe", fragrance_free=True)
    unknown = _product("Unknown")
    unsafe = _product("Unsafe", fragrance_free=False)

    assert scorer.formulation_safety_score(safe, ["fragrance"]) == (100, ["✓ Fragrance-free formulation"])
    assert scorer.formulation_safety_score(unknown, ["fragrance"])[0] == 75
    assert scorer.formulation_safety_score(unsafe, ["fragrance"])[0] == 75

def test_safety_ignores_duplicate_and_unknown_tags(scorer):
    product = _product("Cream", alcohol_free=False)

    score, parts = scorer.formulation_safety_score(product, ["Alcohol", "alcohol", "lanolin"])

    assert score == 80
    assert parts == ["⚠️ May contain drying alcohols"]

def test_no_sensitivities_is_fully_safe(scorer):
    assert scorer.formulation_safety_score(_product("Any"), []) == (100, ["No known sensitivities to check"])

def test_concern_coverage_without_concerns(scorer, serum_product):
    assert scorer.concern_coverage_score(serum_product, []) == (70, ["No specific concerns to address"], [])

def test_concern_coverage_via_benefits(scorer):
    product = _product("Refiner", provided_benefits=["Pore-Minimizing Complex"])

    score, parts, addressed = scorer.concern_coverage_score(product, ["Large Pores"])

    assert score == 100
    assert addressed == ["largepores"]
    assert parts == ["Addresses 1/1 of your concerns", "Comprehensive concern coverage"]

def test_concern_coverage_no_match(scorer, plain_balm):
    score, parts, addressed = scorer.concern_coverage_score(plain_balm, ["acne"])

    assert score == 30
    assert addressed == []

def test_synergy_pair_in_product(scorer, service):
    product = _product("Duo", key_ingredients=["Niacinamide", "Sodium Hyaluronate"])
    interactions = service.analyze_interactions(["niacinamide", "hyaluronic acid"])

    score, parts, counts = scorer.ingredient_synergy_score(product, interactions)

    assert score == 65
    assert counts == {"synergistic": 1, "incompatible": 0, "potentiating": 0}
    assert parts == ["1 beneficial ingredient synergies"]

def test_high_severity_conflict_penalty(scorer, service):
    product = _product("Clash", key_ingredients=["Retinol", "BHA"])
    interactions = service.analyze_interactions(["retinol", "salicylic acid"])

    score, parts, counts = scorer.ingredient_synergy_score(product, interactions)

    assert score == 25
    assert counts["incompatible"] == 1
    assert parts == ["⚠️ 1 potential ingredient conflicts"]

def test_potentiation_bonus(scorer, service):
    product = _product("Boost", key_ingredients=["Peptides", "Retinyl Palmitate"])
    interactions = service.analyze_interactions(["peptides", "retinol"])

    score, _, counts = scorer.ingredient_synergy_score(product, interactions)

    assert score == 60
    assert counts["potentiating"] == 1

def test_single_key_ingredient_is_neutral(scorer, service, plain_balm):
    interactions = service.analyze_interactions(["retinol", "salicylic acid"])

    score, parts, _ = scorer.ingredient_synergy_score(plain_balm, interactions)

    assert score == 50
    assert parts == ["Single key ingredient - no interaction analysis"]

def test_category_relevance(scorer):
    serum = _product("Night Serum")
    sunscreen = _product("Daily Shield", main_category="Sunscreen")

    assert scorer.category_relevance_score(serum, "oily") == (95, "Suitable category for oily skin")
    assert scorer.category_relevance_score(sunscreen, "oily") == (50, None)
    assert scorer.category_relevance_score(serum, "combination")[0] == 92
    assert scorer.category_relevance_score(serum, "") == (60, None)

# === 설명 / 태그 ===

@pytest.mark.parametrize("score,label", [
    (100, "Excellent match"),
    (80, "Excellent match"),
    (79, "Good match"),
    (60, "Good match"),
    (40, "Moderate match"),
    (39, "Limited match"),
    (0, "Limited match"),
])
def test_explanation_bands(scorer, score, label):
    assert scorer.build_explanation(["a"], score) == f"{label}: a"

def test_explanation_keeps_first_four_parts(scorer):
    explanation = scorer.build_explanation(["one", "", "two", "three", "four", "five"], 50)

    assert explanation == "Moderate match: one • two • three • four"

def test_empty_explanation(scorer):
    assert scorer.build_explanation([], 10) == "Limited match: Basic compatibility analysis completed"

# === 순위화 ===

def test_recommend_products_ranking(service, oily_profile, serum_product, acne_toner, plain_balm, gentle_cream):
    result = service.recommend_products([plain_balm, serum_product, gentle_cream, acne_toner], oily_profile)

    ranked = [(r["product_id"], r["score"]) for r in result["recommendations"]]
    assert ranked == [("p-003", 72), ("p-001", 57), ("p-004", 37)]
    assert result["metadata"]["quality_threshold"] == 30
    assert result["metadata"]["total_candidates"] == 4
    assert result["semantic_analysis"]["method"] == "Semantic Ontology Reasoning"

def test_recommend_products_strict_mode_and_limit(service, oily_profile, serum_product, acne_toner, gentle_cream):
    strict = service.recommend_products([serum_product, acne_toner, gentle_cream], oily_profile, strict_mode=True)
    limited = service.recommend_products([serum_product, acne_toner, gentle_cream], oily_profile, limit=1)

    assert [r["product_id"] for r in strict["recommendations"]] == ["p-003", "p-001"]
    assert strict["metadata"]["quality_threshold"] == 50
    assert [r["product_id"] for r in limited["recommendations"]] == ["p-003"]

def test_recommend_products_prefilters_sensitivities(service, sensitive_oily_profile, serum_product, acne_toner):
    result = service.recommend_products([serum_product, acne_toner], sensitive_oily_profile)

    assert result["metadata"]["safe_candidates"] == 1
    assert [r["product_id"] for r in result["recommendations"]] == ["p-001"]

def test_scoring_errors_are_wrapped_and_skipped(service, oily_profile, serum_product, acne_toner, monkeypatch):
    scorer = service.scorer
    original = scorer.semantic_match_score

    def flaky(product, skin, recommendations):
        if product.product_id == "p-001":
            raise RuntimeError("boom")
        return original(product, skin, recommendations)

    monkeypatch.setattr(scorer, "semantic_match_score", flaky)

    with pytest.raises(ScoreCalculationError):
        service.score_product(serum_product, oily_profile)

    result = service.recommend_products([serum_product, acne_toner], oily_profile)
    assert [r["product_id"] for r in result["recommendations"]] == ["p-003"]
