"""Plan selection: free plans short-circuit, paid plans go through checkout."""

from dataclasses import dataclass
from typing import Optional

from app.models.plan import Plan, PlanCatalog
from app.services.billing.checkout_issuer import CheckoutSessionIssuer
from app.utils.exceptions import AuthRequiredError, ValidationError


@dataclass(frozen=True)
class PlanSelection:
    plan: Plan
    checkout_url: Optional[str] = None

    @property
    def message(self) -> str:
        if self.checkout_url is None:
            return f"You now have access to the {self.plan.name} features!"
        return "Redirect to checkout to complete your subscription"


class PlanSelectionService:
    def __init__(self, catalog: PlanCatalog, issuer: CheckoutSessionIssuer):
        self.catalog = catalog
        self.issuer = issuer

    async def select(self, plan_id: str, access_token: Optional[str], origin: str) -> PlanSelection:
        plan = self.catalog.get(plan_id)
        if plan is None:
            raise ValidationError(message="Unknown plan", details={"plan": plan_id})

        if plan.is_free:
            return PlanSelection(plan=plan)

        if not access_token:
            raise AuthRequiredError(message="Please sign in to continue", details={"action": "sign_in"})

        url = await self.issuer.issue_checkout(access_token, plan, origin)
        return PlanSelection(plan=plan, checkout_url=url)
