"""Command-line access to the comparison workspace.

Usage:
    python -m listiq.cli payment --price 300000 --down 20 --rate 6.5 --taxes 6000
    python -m listiq.cli list --sort pricePerSqFt-asc
    python -m listiq.cli export "Downtown Condos" > downtown.json
    python -m listiq.cli import downtown.json
"""

import argparse
import sys
from decimal import Decimal
from pathlib import Path

from listiq.config import settings
from listiq.data import share
from listiq.data.store import SqlStateStore
from listiq.engine.comparison import display_price_per_sqft
from listiq.engine.mortgage import PaymentBreakdown, total_monthly_payment
from listiq.engine.sorting import View
from listiq.errors import ListIQError
from listiq.models.property import MortgageSettings
from listiq.workspace import ComparisonWorkspace


def print_breakdown(b: PaymentBreakdown) -> None:
    print(f"\n{'=' * 40}")
    print("  Monthly Payment")
    print(f"{'=' * 40}")
    print(f"  Down payment:     ${b.down_payment:>12,.2f}")
    print(f"  Loan amount:      ${b.principal:>12,.2f}")
    print(f"  Mortgage (P&I):   ${b.monthly_mortgage:>12,.2f}")
    print(f"  Property taxes:   ${b.monthly_taxes:>12,.2f}")
    print(f"  Insurance:        ${b.monthly_insurance:>12,.2f}")
    print(f"  Total:            ${b.total_monthly:>12,.2f}")
    print()


def print_properties(ws: ComparisonWorkspace, view: View) -> None:
    summary = ws.comparison()
    rows = ws.visible_properties(view)
    if not rows:
        print("No properties.")
        return
    for prop in rows:
        tags = []
        if prop.id == summary.best_value_id:
            tags.append("best value")
        if prop.id == summary.lowest_payment_id:
            tags.append("lowest payment")
        if prop.id in ws.favorite_ids:
            tags.append("favorite")
        flag = f"  [{', '.join(tags)}]" if tags else ""
        print(f"  {prop.address:<45} ${prop.price:>12,.0f}  {prop.square_feet:>6,} sqft  "
              f"{display_price_per_sqft(prop):>7}/sqft{flag}")


def _workspace(db_url: str) -> ComparisonWorkspace:
    return ComparisonWorkspace(
        SqlStateStore(db_url),
        default_mortgage=MortgageSettings(
            interest_rate=settings.default_interest_rate,
            down_payment_pct=settings.default_down_payment_pct,
            loan_term_years=settings.default_loan_term_years,
        ),
        insurance_rate_pct=settings.insurance_rate_pct,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="ListIQ property comparison CLI")
    parser.add_argument("--db", default=settings.database_url, help="Database URL for saved state")
    sub = parser.add_subparsers(dest="command", required=True)

    pay = sub.add_parser("payment", help="Estimate a monthly payment")
    pay.add_argument("--price", type=Decimal, required=True)
    pay.add_argument("--down", type=Decimal, default=settings.default_down_payment_pct, help="Down payment %%")
    pay.add_argument("--rate", type=Decimal, default=settings.default_interest_rate, help="Interest rate %%")
    pay.add_argument("--taxes", type=Decimal, default=Decimal("0"), help="Annual property taxes")
    pay.add_argument("--term", type=int, default=settings.default_loan_term_years, help="Loan term in years")

    ls = sub.add_parser("list", help="List properties in the workspace")
    ls.add_argument("--sort", help='Sort option, e.g. "price-asc"')
    ls.add_argument("--favorites", action="store_true", help="Only show favorites")

    exp = sub.add_parser("export", help="Export a saved search as JSON")
    exp.add_argument("name", help="Saved search name")
    exp.add_argument("--code", action="store_true", help="Print a share code instead of JSON")

    imp = sub.add_parser("import", help="Import a shared search (file path or share code)")
    imp.add_argument("source")

    args = parser.parse_args(argv)

    if args.command == "payment":
        if args.term <= 0:
            parser.error("--term must be positive")
        print_breakdown(total_monthly_payment(
            args.price, args.down, args.rate, args.taxes, args.term, settings.insurance_rate_pct,
        ))
        return 0

    ws = _workspace(args.db)
    try:
        if args.command == "list":
            if args.sort:
                ws.set_sort(args.sort)
            print_properties(ws, View.FAVORITES if args.favorites else View.ALL)
        elif args.command == "export":
            search = ws.find_search_by_name(args.name)
            if search is None:
                print(f'No saved search named "{args.name}"', file=sys.stderr)
                return 1
            print(share.encode_share_code(search) if args.code else share.export_search_json(search))
        elif args.command == "import":
            try:
                raw = Path(args.source).read_text(encoding="utf-8")
            except OSError:
                raw = args.source  # not a file: treat as a share code
            search = ws.import_shared(raw)
            print(f'Imported "{search.name}" with {len(search.properties)} properties.')
    except (ListIQError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
