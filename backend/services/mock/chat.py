def mock_chat_reply(user_message: str, contract_context, history: list[dict]) -> str:
    """Generate a canned assistant reply from the contract context for testing"""
    coverages = ", ".join(contract_context.main_coverages) or "aucune garantie identifiée"

    return (
        f"Votre contrat {contract_context.contract_type} obtient un score de "
        f"{contract_context.optimization_score}/100. Il couvre : {coverages}.\n\n"
        f"Les économies potentielles sont estimées à {contract_context.potential_savings}€ par an. "
        "Pour une réponse détaillée à votre question, activez l'analyse IA ou contactez un expert."
    )
