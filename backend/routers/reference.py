from fastapi import APIRouter

from data.plans import PRICING_PLANS, UNLIMITED

router = APIRouter(prefix="/api", tags=["reference"])


@router.get("/plans")
async def get_plans():
    """Get available subscription plans and their limits"""
    return {
        key: {
            "name": val["name"],
            "price": val["price"],
            "documentsLimit": "unlimited" if val["documents_limit"] == UNLIMITED else val["documents_limit"],
            "features": val["features"],
        }
        for key, val in PRICING_PLANS.items()
    }
