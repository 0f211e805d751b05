#!/usr/bin/env python3
# scripts/seed_sample_data.py
import argparse

import config
import crud
from dependencies import create_backend


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Insert the starter assets and borrowers (idempotent).")
    ap.add_argument(
        "--storage",
        choices=sorted(config.STORAGE_BACKENDS),
        default=None,
        help="Backend to seed (default: APP_STORAGE)",
    )
    args = ap.parse_args(argv)

    backend = create_backend(args.storage or config.storage_backend())
    store = backend.open()
    try:
        result = crud.seed_sample_data(store)
    finally:
        store.close()

    print(f"Backend: {backend.name}")
    print(f"Created: {result['created']} (skipped existing: {result['skipped']})")
    print("OK")


if __name__ == "__main__":
    main()
