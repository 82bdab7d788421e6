"""
지식 그래프 로드/빌드 테스트
rdflib 파싱, 그래프 저장소, 성분 병합, 폴백 지식
"""
import pytest

from conftest import TEST_ONTOLOGY, INVALID_ONTOLOGY, build_graph
from matchcare.models.analysis_models import KnowledgeLoadError
from matchcare.models.knowledge_models import Triple
from matchcare.services.fallback_knowledge import FALLBACK_INGREDIENTS, build_fallback_graph
from matchcare.services.graph_store import GraphStore, local_name
from matchcare.services.knowledge_graph_builder import KnowledgeGraphBuilder
from matchcare.services.knowledge_loader import KnowledgeLoader, KnowledgeSource

PREFIXES = """
@prefix : <http://example.org/skincare#> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
"""

# === 그래프 저장소 ===

def test_local_name_hash_and_slash():
    assert local_name("http://example.org/onto#Niacinamide") == "Niacinamide"
    assert local_name("http://example.org/onto/Niacinamide") == "Niacinamide"
    assert local_name("http://example.org/onto/Retinol/") == "Retinol"
    assert local_name("") == ""

def test_graph_store_dedupes_and_indexes_types():
    store = GraphStore()
    triples = [
        Triple("urn:a", "type", "http://x#Ingredient"),
        Triple("urn:a", "label", "A"),
        Triple("urn:a", "label", "A"),
        Triple("urn:b", "type", "http://x#SkinType"),
    ]

    count = store.load(triples)

    assert count == 3
    assert len(store) == 3
    assert store.subjects_of_type("Ingredient") == ["urn:a"]
    assert store.first_object("urn:a", "label") == "A"
    assert store.objects("urn:a", "missing") == []
    assert store.triples((None, "type", None)) == [
        Triple("urn:a", "type", "http://x#Ingredient"),
        Triple("urn:b", "type", "http://x#SkinType"),
    ]

    store.clear()
    assert len(store) == 0
    assert store.subjects() == []

# === 로더 ===

def test_parse_document_normalizes_predicates():
    triples = KnowledgeLoader().parse_document(TEST_ONTOLOGY)

    predicates = {t.predicate for t in triples}
    assert {"type", "label", "recommendedFor", "treats", "efficacyScore"} <= predicates
    assert not any(p.startswith("http") for p in predicates)

@pytest.mark.parametrize("document", ["", "   \n", INVALID_ONTOLOGY])
def test_parse_document_rejects_bad_input(document):
    with pytest.raises(KnowledgeLoadError):
        KnowledgeLoader().parse_document(document)

def test_load_falls_through_to_secondary_source(tmp_path):
    secondary = tmp_path / "secondary.ttl"
    secondary.write_text(TEST_ONTOLOGY, encoding="utf-8")
    sources = [
        KnowledgeSource("primary", path=str(tmp_path / "missing.ttl")),
        KnowledgeSource("secondary", path=str(secondary)),
    ]
    store = GraphStore()

    result = KnowledgeLoader().load(store, sources)

    assert result.loaded
    assert result.source == "secondary"
    assert result.attempted == ["primary", "secondary"]
    assert result.triple_count == len(store) > 0

def test_load_all_sources_fail_leaves_store_empty(tmp_path):
    store = GraphStore()
    store.load([Triple("urn:old", "label", "stale")])
    sources = [
        KnowledgeSource("primary", path=str(tmp_path / "missing.ttl")),
        KnowledgeSource("inline", text=INVALID_ONTOLOGY),
    ]

    result = KnowledgeLoader().load(store, sources)

    assert not result.loaded
    assert result.error
    assert len(store) == 0

def test_source_without_path_or_text_fails():
    with pytest.raises(KnowledgeLoadError):
        KnowledgeSource("primary").read()

# === 빌더 ===

def test_build_ingredients_keyed_by_lowercase_label(graph):
    assert graph.ingredient_count == 8
    assert "salicylic acid" in graph.ingredients
    assert "vitamin c" in graph.ingredients

    salicylic = graph.get_ingredient("Salicylic Acid")
    assert salicylic.label == "Salicylic Acid"
    assert salicylic.recommended_for == ("combination", "oily")
    assert salicylic.treats == ("acne", "largepores")
    assert salicylic.incompatible_with == ("retinol",)
    assert salicylic.efficacy_score == 85
    assert salicylic.safety_rating == 7

def test_relations_resolve_to_ingredient_identifiers(graph):
    retinol = graph.get_ingredient("retinol")
    peptides = graph.get_ingredient("peptides")

    assert retinol.incompatible_with == ("vitamin c",)
    assert peptides.potentiates_effect_of == ("retinol",)

def test_missing_scores_use_defaults(graph):
    peptides = graph.get_ingredient("peptides")

    assert peptides.efficacy_score == 50
    assert peptides.safety_rating == 5
    assert peptides.concentration == 1.0

def test_entity_maps_and_labels(graph):
    assert set(graph.skin_types) == {"oily", "dry", "normal", "combination", "sensitive"}
    assert graph.skin_types["sensitive"].description == "Reactive skin"
    assert graph.concerns["largepores"].label == "Large Pores"
    assert graph.benefit_label("antiaging") == "Anti-Aging"
    assert graph.benefit_label("unknown") == "unknown"
    assert graph.function_label("humectant") == "Humectant"

def test_duplicate_labels_merge_into_one_ingredient():
    document = PREFIXES + """
    :NiacinamideA rdf:type :Ingredient ; rdfs:label "Niacinamide" ;
      :recommendedFor :Oily ; :efficacyScore 88 .
    :NiacinamideB rdf:type :KeyIngredient ; rdfs:label "niacinamide" ;
      :recommendedFor :Combination ; :treats :Redness .
    """

    graph = build_graph(document)

    assert list(graph.ingredients) == ["niacinamide"]
    merged = graph.ingredients["niacinamide"]
    assert merged.recommended_for == ("combination", "oily")
    assert merged.treats == ("redness",)
    assert merged.efficacy_score == 88

def test_invalid_and_out_of_range_scores():
    document = PREFIXES + """
    :Odd rdf:type :Ingredient ; rdfs:label "Odd" ;
      :efficacyScore "very high" ; :safetyRating 42 ; :concentration "-3" .
    :Low rdf:type :Ingredient ; rdfs:label "Low" ;
      :efficacyScore -20 ; :safetyRating "7.6" .
    """

    graph = build_graph(document)

    odd = graph.ingredients["odd"]
    assert odd.efficacy_score == 50
    assert odd.safety_rating == 10
    assert odd.concentration == 1.0

    low = graph.ingredients["low"]
    assert low.efficacy_score == 0
    assert low.safety_rating == 8

def test_non_finite_scores_use_defaults():
    document = PREFIXES + """
    :Huge rdf:type :Ingredient ; rdfs:label "Huge" ;
      :efficacyScore 1e400 ; :safetyRating "-INF" ; :concentration "NaN" .
    """

    graph = build_graph(document)

    huge = graph.ingredients["huge"]
    assert huge.efficacy_score == 50
    assert huge.safety_rating == 5
    assert huge.concentration == 1.0

def test_unlabeled_ingredient_uses_local_name():
    document = PREFIXES + ":ZincOxide rdf:type :Ingredient ; :recommendedFor :Sensitive ."

    graph = build_graph(document)

    assert "zincoxide" in graph.ingredients
    assert graph.ingredients["zincoxide"].label == "ZincOxide"

def test_build_is_deterministic():
    first = build_graph(TEST_ONTOLOGY)
    second = build_graph(TEST_ONTOLOGY)

    assert first.ingredients == second.ingredients
    assert first.concerns == second.concerns

def test_builder_keeps_flags_from_caller():
    store = GraphStore()
    store.load(KnowledgeLoader().parse_document(TEST_ONTOLOGY))

    graph = KnowledgeGraphBuilder().build(store, loaded=True, source="primary", generation=7)

    assert graph.loaded
    assert graph.source == "primary"
    assert graph.generation == 7

# === 폴백 지식 ===

def test_fallback_graph_shape():
    graph = build_fallback_graph(generation=3)

    assert not graph.loaded
    assert graph.source == "fallback"
    assert graph.generation == 3
    assert set(graph.ingredients) == set(FALLBACK_INGREDIENTS)
    assert set(graph.skin_types) == {"dry", "oily", "combination", "sensitive", "normal"}
    assert graph.ingredients["retinol"].incompatible_with == ("salicylic acid", "vitamin c")

def test_service_uses_fallback_for_invalid_document(settings):
    from matchcare.services.semantic_service import SemanticService

    service = SemanticService(settings)
    result = service.reload(INVALID_ONTOLOGY)

    assert not result.loaded
    assert not service.loaded
    assert service.graph.source == "fallback"
    assert service.graph.generation == 1
    assert service.get_stats()["method"] == "Rule-based Fallback"

def test_service_uses_fallback_when_no_ingredients(settings):
    from matchcare.services.semantic_service import SemanticService

    service = SemanticService(settings)
    result = service.reload(PREFIXES + ':Oily rdf:type :SkinType ; rdfs:label "Oily" .')

    assert not result.loaded
    assert result.error
    assert service.graph.source == "fallback"

def test_service_loads_document_with_infinite_score(settings):
    from matchcare.services.semantic_service import SemanticService

    service = SemanticService(settings)
    result = service.reload(PREFIXES + """
    :Niacinamide rdf:type :Ingredient ; rdfs:label "Niacinamide" ;
      :recommendedFor :Oily ; :efficacyScore 1e400 .
    """)

    assert result.loaded
    assert service.graph.ingredients["niacinamide"].efficacy_score == 50

def test_service_uses_fallback_when_build_fails(settings, monkeypatch):
    from matchcare.services.semantic_service import SemanticService

    service = SemanticService(settings)

    def broken_build(*args, **kwargs):
        raise RuntimeError("corrupt store")

    monkeypatch.setattr(service.builder, "build", broken_build)
    result = service.reload(TEST_ONTOLOGY)

    assert not result.loaded
    assert "corrupt store" in result.error
    assert not service.loaded
    assert service.graph.source == "fallback"
    assert service.graph.generation == 1

def test_service_loads_bundled_ontology():
    from matchcare.config.settings import Settings
    from matchcare.services.semantic_service import SemanticService

    service = SemanticService(Settings())
    result = service.reload()

    assert result.loaded
    assert result.source == "primary"
    assert service.graph.ingredient_count == 15
    assert "tea tree oil" in service.graph.ingredients

def test_service_falls_back_to_secondary_ontology(tmp_path):
    from matchcare.config.settings import Settings, DEFAULT_SECONDARY_ONTOLOGY
    from matchcare.services.semantic_service import SemanticService

    settings = Settings(
        primary_ontology_path=str(tmp_path / "missing.ttl"),
        secondary_ontology_path=str(DEFAULT_SECONDARY_ONTOLOGY)
    )
    service = SemanticService(settings)
    result = service.reload()

    assert result.loaded
    assert result.source == "secondary"
    assert service.graph.ingredient_count == 6
