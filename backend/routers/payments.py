import logging

import stripe
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from models import User
from schemas.auth import CheckoutInput, RedirectResponse
from services import db_ops
from services.auth import require_user
from services.container import Services, get_db, get_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/billing/checkout", response_model=RedirectResponse)
async def create_checkout_session(input: CheckoutInput, user: User = Depends(require_user),
                                  services: Services = Depends(get_services)):
    """Create a Stripe checkout session for a plan upgrade"""
    try:
        return RedirectResponse(**services.billing.create_checkout(input.plan, user.id, user.email))
    except stripe.StripeError as e:
        logger.error("Stripe checkout failed for user %s: %s", user.id, e)
        raise HTTPException(status_code=502, detail="Failed to create checkout session")


@router.post("/billing/portal", response_model=RedirectResponse)
async def create_portal_session(user: User = Depends(require_user), db: Session = Depends(get_db),
                                services: Services = Depends(get_services)):
    """Open the Stripe customer portal to manage the subscription"""
    profile = db_ops.ensure_profile(db, user)
    try:
        return RedirectResponse(**services.billing.create_portal(profile.stripe_customer_id))
    except stripe.StripeError as e:
        logger.error("Stripe portal failed for user %s: %s", user.id, e)
        raise HTTPException(status_code=502, detail="Failed to open billing portal")


@router.post("/stripe-webhook")
async def stripe_webhook(request: Request, db: Session = Depends(get_db),
                         services: Services = Depends(get_services)):
    """Handle Stripe webhook events"""
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")

    try:
        event = services.billing.construct_event(payload, sig_header)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    except stripe.SignatureVerificationError:
        raise HTTPException(status_code=400, detail="Invalid signature")

    plan = services.billing.apply_event(db, event)
    return {"received": True, "plan": plan}
