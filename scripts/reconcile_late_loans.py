#!/usr/bin/env python3
# scripts/reconcile_late_loans.py
import argparse
from datetime import date

import config
from dependencies import create_backend
from ledger import LoanLedger


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        description="Write Late status onto Borrowed loans past their planned return date, then audit quantities."
    )
    ap.add_argument("--today", type=date.fromisoformat, default=None, help="Override today's date (YYYY-MM-DD)")
    ap.add_argument("--dry-run", action="store_true", help="Report without writing")
    args = ap.parse_args(argv)

    backend = create_backend(config.storage_backend())
    store = backend.open()
    try:
        today = args.today or date.today()
        ledger = LoanLedger(store, today=lambda: today, actor="reconcile")

        late = ledger.reconcile_late_loans(commit=not args.dry_run)
        if args.dry_run:
            store.rollback()
        for loan in late:
            print(f"Late: {loan.id} asset={loan.asset_id} due={loan.planned_return_date.isoformat()}")
        print(f"Loans marked Late: {len(late)}{' (dry run)' if args.dry_run else ''}")

        discrepancies = ledger.audit_inventory()
        for d in discrepancies:
            print(
                f"Mismatch: {d.asset_name} available={d.available_quantity} "
                f"expected={d.expected_available} (total={d.total_quantity}, on_loan={d.on_loan})"
            )
        print("OK" if not discrepancies else f"Mismatched assets: {len(discrepancies)}")
        return 0 if not discrepancies else 1
    finally:
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
