"""
Expensive integration tests for AssurScan

These tests call the real OpenRouter API (requires OPENROUTER_API_KEY).
RUN SPARINGLY - each test costs money and time.

Usage:
    RUN_EXPENSIVE=1 pytest test_expensive.py
"""

import os

import pytest

from config import get_api_key
from services.analysis import AnalysisClient
from services.chat import ChatClient, ContractSummary
from services.llm import create_client

pytestmark = pytest.mark.skipif(
    not os.environ.get("RUN_EXPENSIVE") or not get_api_key(),
    reason="set RUN_EXPENSIVE=1 and OPENROUTER_API_KEY to call the real model",
)

HOME_CONTRACT = """CONTRAT MULTIRISQUE HABITATION

Assurée : Sophie Bernard
Logement : Appartement 3 pièces, 68 m², Lyon 7e
Statut : Locataire

GARANTIES :
- Responsabilité civile vie privée
- Incendie et explosion
- Dégâts des eaux

MONTANTS :
Prime mensuelle : 32€
Franchise : 450€
Plafond mobilier : 15 000€

EXCLUSIONS :
- Vol sans effraction
- Bris de glace
- Objets de valeur au-delà de 2 000€

Échéance annuelle : 01/09/2025"""


@pytest.mark.asyncio
async def test_real_llm_home_contract():
    """Analyze a home insurance contract with the real model"""
    result = await AnalysisClient(create_client(get_api_key())).analyze(HOME_CONTRACT)

    assert result.contract_type == "habitation"
    assert 0 <= result.optimization_score <= 100
    assert result.main_coverages
    assert result.amounts.prime_mensuelle == 32
    assert any("vol" in e.lower() for e in result.exclusions)


@pytest.mark.asyncio
async def test_real_llm_chat():
    """Ask a follow-up question about an analyzed contract"""
    summary = ContractSummary(
        contract_type="habitation",
        main_coverages=["Responsabilité civile vie privée", "Incendie et explosion", "Dégâts des eaux"],
        amounts={"prime_mensuelle": 32, "franchise": 450, "plafond_garantie": 15000},
        exclusions=["Vol sans effraction", "Bris de glace"],
        optimization_score=55,
        potential_savings=90,
        coverage_gap_count=2,
    )

    reply = await ChatClient(create_client(get_api_key())).reply(
        "Suis-je couvert si on me vole mon vélo dans le local ?", summary, []
    )

    assert len(reply) > 20
