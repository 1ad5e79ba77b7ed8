import re

from services.llm import parse_amount


def _find_amount(text: str, label: str):
    match = re.search(label + r"\s*:?\s*([\d\s.,]+)\s*€", text, re.IGNORECASE)
    if match:
        return parse_amount(match.group(1))
    return None


def _list_section(text: str, header: str) -> list[str]:
    """Collect the '- item' lines that follow a section header"""
    items = []
    in_section = False
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.upper().startswith(header):
            in_section = True
            continue
        if in_section:
            if stripped.startswith("-"):
                items.append(stripped.lstrip("- ").strip())
            elif stripped:
                break
    return items


def mock_contract_analysis(contract_text: str) -> dict:
    """Generate mock contract analysis based on document content for testing"""
    text_lower = contract_text.lower()

    # Determine contract type
    if "automobile" in text_lower or "véhicule" in text_lower:
        contract_type = "auto"
    elif "habitation" in text_lower or "logement" in text_lower:
        contract_type = "habitation"
    elif "santé" in text_lower or "mutuelle" in text_lower:
        contract_type = "santé"
    elif "prévoyance" in text_lower:
        contract_type = "prévoyance"
    elif "assurance vie" in text_lower:
        contract_type = "vie"
    else:
        contract_type = "inconnu"

    coverages = _list_section(contract_text, "GARANTIES")
    exclusions = _list_section(contract_text, "EXCLUSIONS")
    amounts = {
        "prime_mensuelle": _find_amount(contract_text, "prime mensuelle"),
        "franchise": _find_amount(contract_text, "franchise"),
        "plafond_garantie": _find_amount(contract_text, "plafond de garantie"),
    }

    score = 80
    coverage_gaps = []
    recommendations = []

    if any("catastrophe" in e.lower() for e in exclusions):
        score -= 10
        coverage_gaps.append({
            "title": "Catastrophes naturelles non couvertes",
            "description": "Les dommages liés aux catastrophes naturelles sont exclus du contrat.",
            "impact": "Réparations entièrement à votre charge après un arrêté de catastrophe naturelle",
            "solution": "Demandez l'ajout de la garantie catastrophes naturelles à votre assureur",
        })

    if "assistance" not in text_lower:
        score -= 5
        coverage_gaps.append({
            "title": "Pas de garantie assistance",
            "description": "Aucune assistance en cas de panne ou d'accident n'est mentionnée.",
            "impact": "Remorquage et véhicule de remplacement à vos frais",
            "solution": "Ajoutez une option assistance 0 km",
        })

    franchise = amounts["franchise"] or 0
    if franchise >= 300:
        score -= 5
        recommendations.append({
            "title": "Négocier la franchise",
            "description": f"Une franchise de {franchise}€ est élevée pour ce type de contrat.",
            "savings": 60,
            "priority": "moyenne",
        })

    prime = amounts["prime_mensuelle"] or 0
    if prime:
        recommendations.append({
            "title": "Comparer les offres du marché",
            "description": "Une mise en concurrence annuelle permet souvent de réduire la prime.",
            "savings": int(round(prime * 12 * 0.15)),
            "priority": "haute",
        })

    return {
        "contractType": contract_type,
        "mainCoverages": coverages,
        "amounts": amounts,
        "exclusions": exclusions,
        "optimizationScore": max(0, min(100, score)),
        "potentialSavings": sum(r["savings"] for r in recommendations),
        "coverageGaps": coverage_gaps,
        "recommendations": recommendations,
    }
