# Subscription plans. documents_limit of -1 means unlimited scans.
UNLIMITED = -1

DEFAULT_PLAN = "free"

PRICING_PLANS = {
    "free": {
        "name": "Free",
        "price": 0,
        "documents_limit": 3,
        "features": [
            "3 scans de contrats par mois",
            "Analyse IA basique",
            "Accès à ClaireAI (limité)",
            "Statistiques de base",
        ],
    },
    "premium": {
        "name": "Premium",
        "price": 19.99,
        "documents_limit": 50,
        "features": [
            "50 scans de contrats par mois",
            "Analyse IA avancée",
            "Accès illimité à ClaireAI",
            "Statistiques détaillées",
            "Export PDF des analyses",
            "Support prioritaire",
        ],
    },
    "enterprise": {
        "name": "Enterprise",
        "price": 99.99,
        "documents_limit": UNLIMITED,
        "features": [
            "Scans illimités",
            "Analyse IA premium",
            "ClaireAI avec contexte étendu",
            "Statistiques avancées",
            "Export multi-formats",
            "API access",
            "Support dédié 24/7",
            "Onboarding personnalisé",
        ],
    },
}

PAID_PLANS = ("premium", "enterprise")
