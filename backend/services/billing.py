import logging
from typing import Optional

import stripe
from sqlalchemy.orm import Session

from data.plans import DEFAULT_PLAN, PAID_PLANS
from errors import ConfigError
from services import db_ops

logger = logging.getLogger(__name__)


class BillingBridge:
    """Stripe checkout, customer portal and subscription webhooks"""

    def __init__(self, secret_key: Optional[str], webhook_secret: Optional[str],
                 price_ids: dict, app_url: str):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.price_ids = {plan: price for plan, price in price_ids.items() if price}
        self.app_url = app_url.rstrip("/")
        if not secret_key:
            logger.warning("STRIPE_SECRET_KEY not configured - billing features disabled")

    @property
    def configured(self) -> bool:
        return bool(self.secret_key)

    def _require_key(self):
        if not self.secret_key:
            raise ConfigError("Stripe is not configured")

    def create_checkout(self, plan: str, user_id: str, user_email: Optional[str]) -> dict:
        self._require_key()
        price_id = self.price_ids.get(plan)
        if not price_id:
            raise ConfigError(f"Price ID not configured for plan: {plan}")

        session = stripe.checkout.Session.create(
            api_key=self.secret_key,
            mode="subscription",
            payment_method_types=["card"],
            line_items=[{"price": price_id, "quantity": 1}],
            customer_email=user_email or None,
            metadata={"user_id": user_id, "plan": plan},
            subscription_data={"metadata": {"user_id": user_id, "plan": plan}},
            success_url=f"{self.app_url}/dashboard?payment=success",
            cancel_url=f"{self.app_url}/pricing?payment=cancelled",
        )
        return {"url": session.url}

    def create_portal(self, customer_id: Optional[str]) -> dict:
        self._require_key()
        if not customer_id:
            raise ConfigError("No billing account for this user")
        session = stripe.billing_portal.Session.create(
            api_key=self.secret_key,
            customer=customer_id,
            return_url=f"{self.app_url}/settings",
        )
        return {"url": session.url}

    def construct_event(self, payload: bytes, signature: Optional[str]):
        """Verify a webhook signature; raises ValueError or SignatureVerificationError"""
        if not self.secret_key or not self.webhook_secret:
            raise ConfigError("Stripe is not configured")
        return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)

    def apply_event(self, db: Session, event) -> Optional[str]:
        """Update the subscriber's plan from a webhook event. Returns the plan applied."""
        event_type = event["type"]
        obj = event["data"]["object"]

        if event_type == "checkout.session.completed":
            metadata = obj.get("metadata") or {}
            user_id = metadata.get("user_id")
            plan = metadata.get("plan")
            if not user_id or plan not in PAID_PLANS:
                logger.warning("Checkout session %s has no usable metadata", obj.get("id"))
                return None
            profile = db_ops.get_profile(db, user_id)
            if profile is None:
                logger.warning("Checkout completed for unknown user %s", user_id)
                return None
            db_ops.set_plan(db, profile, plan, customer_id=obj.get("customer"),
                            subscription_id=obj.get("subscription"))
            logger.info("User %s upgraded to %s", user_id, plan)
            return plan

        if event_type == "customer.subscription.deleted":
            profile = db_ops.get_profile_by_subscription(db, obj.get("id"))
            if profile is None:
                return None
            db_ops.set_plan(db, profile, DEFAULT_PLAN)
            logger.info("User %s downgraded to %s", profile.id, DEFAULT_PLAN)
            return DEFAULT_PLAN

        return None
