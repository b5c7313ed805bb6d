"""Comparison routes: best value, lowest payment and the payment calculator."""

from fastapi import APIRouter, Depends

from listiq.api.deps import get_workspace
from listiq.api.schemas import ComparisonResponse, PaymentBreakdownResponse, PaymentRequest
from listiq.engine.mortgage import total_monthly_payment
from listiq.workspace import ComparisonWorkspace

router = APIRouter(prefix="/api/v1/comparison", tags=["comparison"])


@router.get("", response_model=ComparisonResponse)
def get_comparison(ws: ComparisonWorkspace = Depends(get_workspace)):
    summary = ws.comparison()
    return ComparisonResponse(
        property_count=summary.property_count,
        mortgage_enabled=ws.mortgage.enabled,
        best_value_id=summary.best_value_id,
        best_price_per_sqft=summary.best_price_per_sqft,
        lowest_payment_id=summary.lowest_payment_id,
        lowest_total_monthly=summary.lowest_total_monthly,
    )


@router.post("/payment", response_model=PaymentBreakdownResponse)
def calculate_payment(req: PaymentRequest, ws: ComparisonWorkspace = Depends(get_workspace)):
    """Stateless monthly payment calculator."""
    breakdown = total_monthly_payment(
        req.price,
        req.down_payment_pct,
        req.interest_rate,
        req.annual_taxes,
        req.loan_term_years,
        ws.insurance_rate_pct,
    )
    return PaymentBreakdownResponse.from_breakdown(breakdown)
