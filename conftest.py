"""
공용 테스트 픽스처
작은 인라인 온톨로지로 구성한 SemanticService와 프로필/제품 샘플
"""
import pytest

from matchcare.config.settings import Settings
from matchcare.models.request import ProductRecord, UserProfile
from matchcare.services.graph_store import GraphStore
from matchcare.services.knowledge_graph_builder import KnowledgeGraphBuilder
from matchcare.services.knowledge_loader import KnowledgeLoader
from matchcare.services.semantic_service import SemanticService

TEST_ONTOLOGY = """
@prefix : <http://example.org/skincare#> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .

:Oily rdf:type :SkinType ; rdfs:label "Oily" .
:Dry rdf:type :SkinType ; rdfs:label "Dry" .
:Normal rdf:type :SkinType ; rdfs:label "Normal" .
:Combination rdf:type :SkinType ; rdfs:label "Combination" .
:Sensitive rdf:type :SkinType ; rdfs:label "Sensitive" ; rdfs:comment "Reactive skin" .

:Acne rdf:type :SkinConcern ; rdfs:label "Acne" .
:LargePores rdf:type :SkinConcern ; rdfs:label "Large Pores" .
:Oiliness rdf:type :SkinConcern ; rdfs:label "Oiliness" .
:Dryness rdf:type :SkinConcern ; rdfs:label "Dryness" .
:Wrinkles rdf:type :SkinConcern ; rdfs:label "Wrinkles" .
:DarkSpots rdf:type :SkinConcern ; rdfs:label "Dark Spots" .

:PoreMinimizing rdf:type :Benefit ; rdfs:label "Pore Minimizing" .
:Hydrating rdf:type :Benefit ; rdfs:label "Hydrating" .
:Exfoliating rdf:type :Benefit ; rdfs:label "Exfoliating" .
:AntiAging rdf:type :Benefit ; rdfs:label "Anti-Aging" .
:Brightening rdf:type :Benefit ; rdfs:label "Brightening" .

:SebumRegulator rdf:type :Function ; rdfs:label "Sebum Regulator" .
:Exfoliant rdf:type :Function ; rdfs:label "Exfoliant" .
:CellRenewal rdf:type :Function ; rdfs:label "Cell Renewal" .
:Humectant rdf:type :Function ; rdfs:label "Humectant" .

:Niacinamide rdf:type :Ingredient ;
  rdfs:label "Niacinamide" ;
  :recommendedFor :Oily ;
  :treats :Oiliness, :LargePores ;
  :hasFunction :SebumRegulator ;
  :provides :PoreMinimizing ;
  :synergisticWith :HyaluronicAcid ;
  :efficacyScore 88 ;
  :safetyRating 9 .

:SalicylicAcid rdf:type :KeyIngredient ;
  rdfs:label "Salicylic Acid" ;
  :recommendedFor :Oily, :Combination ;
  :treats :Acne, :LargePores ;
  :hasFunction :Exfoliant ;
  :provides :Exfoliating ;
  :incompatibleWith :Retinol ;
  :efficacyScore 85 ;
  :safetyRating 7 .

:Retinol rdf:type :Ingredient ;
  rdfs:label "Retinol" ;
  :recommendedFor :Normal, :Oily ;
  :treats :Wrinkles, :Acne ;
  :hasFunction :CellRenewal ;
  :provides :AntiAging ;
  :incompatibleWith :VitaminC ;
  :efficacyScore 95 ;
  :safetyRating 5 .

:VitaminC rdf:type :Ingredient ;
  rdfs:label "Vitamin C" ;
  :recommendedFor :Dry, :Normal ;
  :treats :DarkSpots ;
  :provides :Brightening ;
  :efficacyScore 92 ;
  :safetyRating 6 .

:HyaluronicAcid rdf:type :Ingredient ;
  rdfs:label "Hyaluronic Acid" ;
  :recommendedFor :Dry, :Normal, :Sensitive ;
  :treats :Dryness ;
  :hasFunction :Humectant ;
  :provides :Hydrating ;
  :synergisticWith :Niacinamide ;
  :efficacyScore 95 ;
  :safetyRating 10 .

:Peptides rdf:type :Ingredient ;
  rdfs:label "Peptides" ;
  :recommendedFor :Normal ;
  :treats :Wrinkles ;
  :potentiatesEffectOf :Retinol .

:FragranceOil rdf:type :Ingredient ;
  rdfs:label "Fragrance Oil" ;
  :recommendedFor :Oily ;
  :treats :Acne .

:Glycerin rdf:type :Ingredient ;
  rdfs:label "Glycerin" ;
  :recommendedFor :Dry ;
  :treats :Dryness ;
  :provides :Hydrating ;
  :efficacyScore 60 ;
  :safetyRating 10 .
"""

INVALID_ONTOLOGY = "this is @@@ not turtle {{{"

def build_graph(document: str):
    """문서 → KnowledgeGraph (서비스 없이)"""
    store = GraphStore()
    triples = KnowledgeLoader().parse_document(document)
    store.load(triples)
    return KnowledgeGraphBuilder().build(store, loaded=True, source="inline", generation=1)

@pytest.fixture
def settings():
    """파일 소스 없는 테스트 설정"""
    return Settings(
        primary_ontology_path=None,
        secondary_ontology_path=None,
        cache_ttl_seconds=3600,
        cache_max_size=100
    )

@pytest.fixture
def service(settings):
    """테스트 온톨로지가 로드된 서비스"""
    semantic_service = SemanticService(settings)
    result = semantic_service.reload(TEST_ONTOLOGY)
    assert result.loaded
    return semantic_service

@pytest.fixture
def graph():
    return build_graph(TEST_ONTOLOGY)

@pytest.fixture
def oily_profile():
    return UserProfile(skin_type="oily", skin_concerns=["acne", "largepores"])

@pytest.fixture
def sensitive_oily_profile():
    return UserProfile(skin_type="oily", skin_concerns=["acne", "largepores"], known_sensitivities=["fragrance"])

@pytest.fixture
def serum_product():
    return ProductRecord(
        product_id="p-001",
        product_name="Clarifying Serum",
        brand="Test Lab",
        main_category="Serum",
        key_ingredients=["Niacinamide", "Sodium Hyaluronate"],
        suitable_for_skin_types=["oily"],
        addresses_concerns=["acne"],
        alcohol_free=True,
        fragrance_free=True,
        paraben_free=True,
        sulfate_free=True,
        silicone_free=True
    )
