"""FastAPI dependency injection."""

import functools

from listiq.config import settings
from listiq.data.store import SqlStateStore
from listiq.data.summary import ComparisonSummarizer
from listiq.models.property import MortgageSettings
from listiq.workspace import ComparisonWorkspace


@functools.lru_cache
def get_workspace() -> ComparisonWorkspace:
    return ComparisonWorkspace(
        SqlStateStore(settings.database_url),
        default_mortgage=MortgageSettings(
            enabled=False,
            interest_rate=settings.default_interest_rate,
            down_payment_pct=settings.default_down_payment_pct,
            loan_term_years=settings.default_loan_term_years,
        ),
        insurance_rate_pct=settings.insurance_rate_pct,
    )


def get_summarizer() -> ComparisonSummarizer:
    return ComparisonSummarizer(insurance_rate_pct=settings.insurance_rate_pct)
