"""Claude-written comparison summary with a deterministic fallback.

Every result carries ``used_ai`` so callers can tell the user when they are
looking at the plain top-5 list instead of a model-written summary.
"""

import json
import logging
import re
from decimal import Decimal, ROUND_HALF_UP

import anthropic

from listiq.config import settings
from listiq.data.cache import cached_by
from listiq.engine.comparison import best_value, display_price_per_sqft, lowest_monthly_payment, price_per_sqft
from listiq.engine.mortgage import DEFAULT_INSURANCE_RATE_PCT, payment_for
from listiq.engine.sorting import NullPolicy, SortField, SortOption, sort_properties
from listiq.models.property import MortgageSettings, Property
from listiq.models.summary import ComparisonNarrative, SummaryPayload

logger = logging.getLogger(__name__)

FALLBACK_LIMIT = 5

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _dollars(value: Decimal) -> str:
    return f"${value.quantize(Decimal('1'), ROUND_HALF_UP):,}"


def _describe(prop: Property, mortgage: MortgageSettings, insurance_rate_pct: Decimal) -> str:
    parts = [
        f"{prop.address}: {_dollars(prop.price)}",
        f"{prop.square_feet:,} sq ft ({display_price_per_sqft(prop)}/sq ft)",
        f"{prop.bedrooms} bd / {prop.bathrooms} ba",
    ]
    if prop.year_built:
        parts.append(f"built {prop.year_built}")
    if prop.taxes:
        parts.append(f"taxes {_dollars(prop.taxes)}/yr")
    breakdown = payment_for(prop, mortgage, insurance_rate_pct)
    if breakdown is not None:
        parts.append(f"est. {_dollars(breakdown.total_monthly)}/mo")
    return ", ".join(parts)


def fallback_summary(
    properties: list[Property],
    mortgage: MortgageSettings,
    insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
) -> str:
    """Plain-text summary: the top properties by price per square foot."""
    if not properties:
        return "No properties to compare yet."

    eligible = [p for p in properties if p.price > 0 and price_per_sqft(p) is not None]
    ranked = sort_properties(
        eligible, SortOption(SortField.PRICE_PER_SQFT), null_policy=NullPolicy.LAST,
    )
    lines = [f"Comparing {len(properties)} properties. Top properties by price per square foot:"]
    for i, prop in enumerate(ranked[:FALLBACK_LIMIT], start=1):
        lines.append(f"{i}. {_describe(prop, mortgage, insurance_rate_pct)}")
    return "\n".join(lines)


def parse_summary_response(text: str) -> SummaryPayload:
    """Pull the first JSON object out of a model response and validate it.

    Raises:
        ValueError: if no JSON object is present or it does not match SummaryPayload.
    """
    match = _JSON_OBJECT.search(text)
    if not match:
        raise ValueError("No JSON object in model response")
    return SummaryPayload.model_validate(json.loads(match.group(0)))


def _render(payload: SummaryPayload) -> str:
    lines = [payload.headline.strip()]
    lines.extend(f"- {h.strip()}" for h in payload.highlights if h.strip())
    return "\n".join(lines)


def comparison_fingerprint(
    summarizer: "ComparisonSummarizer",
    properties: list[Property],
    mortgage: MortgageSettings,
) -> str:
    """Order-independent description of a comparison set, used as the cache key."""
    listings = sorted(
        json.dumps([
            p.id, p.address, str(p.price), p.square_feet,
            str(p.taxes), p.bedrooms, str(p.bathrooms), p.year_built,
        ])
        for p in properties
    )
    terms = [
        mortgage.enabled, str(mortgage.interest_rate),
        str(mortgage.down_payment_pct), mortgage.loan_term_years,
    ]
    return json.dumps({"listings": listings, "mortgage": terms, "insurance": str(summarizer.insurance_rate_pct)})


class ComparisonSummarizer:
    def __init__(self, insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT):
        self.insurance_rate_pct = insurance_rate_pct

    def build_prompt(self, properties: list[Property], mortgage: MortgageSettings) -> str:
        lines = [f"- {_describe(p, mortgage, self.insurance_rate_pct)}" for p in properties]

        best = best_value(properties)
        if best is not None:
            lines.append(f"\nBest value (lowest price per sq ft): {best.address}")
        lowest = lowest_monthly_payment(properties, mortgage, self.insurance_rate_pct)
        if lowest is not None:
            lines.append(
                f"Lowest monthly payment: {lowest.address} "
                f"({mortgage.down_payment_pct}% down, {mortgage.interest_rate}% over {mortgage.loan_term_years} years)"
            )

        data_block = "\n".join(lines)
        return (
            "You are helping a home buyer compare listings. Using only the data below, "
            "summarize the trade-offs in plain language. Return ONLY valid JSON, no other text.\n\n"
            f"Listings:\n{data_block}\n\n"
            'Return JSON: {"headline": <one sentence>, "highlights": [<up to 5 short sentences>]}'
        )

    @cached_by("summary", comparison_fingerprint, ttl_seconds=settings.summary_cache_ttl_seconds)
    async def _ask_model(self, properties: list[Property], mortgage: MortgageSettings) -> dict:
        prompt = self.build_prompt(properties, mortgage)
        client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
        message = await client.messages.create(
            model=settings.summary_model,
            max_tokens=settings.summary_max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        return parse_summary_response(message.content[0].text).model_dump()

    async def summarize(self, properties: list[Property], mortgage: MortgageSettings) -> ComparisonNarrative:
        def degraded() -> ComparisonNarrative:
            return ComparisonNarrative(
                text=fallback_summary(properties, mortgage, self.insurance_rate_pct),
                used_ai=False,
                property_count=len(properties),
            )

        if not properties:
            return degraded()
        if not settings.anthropic_api_key:
            logger.debug("Anthropic API key not configured, using fallback summary")
            return degraded()

        try:
            data = await self._ask_model(properties, mortgage)
            payload = SummaryPayload.model_validate(data)
        except (anthropic.APIError, ValueError, IndexError, AttributeError) as e:
            logger.warning("AI comparison summary failed, using fallback: %s", e)
            return degraded()

        return ComparisonNarrative(text=_render(payload), used_ai=True, property_count=len(properties))


async def generate_comparison_summary(
    properties: list[Property],
    mortgage: MortgageSettings,
    insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
) -> ComparisonNarrative:
    return await ComparisonSummarizer(insurance_rate_pct).summarize(properties, mortgage)
