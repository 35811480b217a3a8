#!/usr/bin/env python3
"""Generate a sample office portfolio and its dashboards.

This script builds synthetic offices, writes the records to JSON files in the
local/ folder and, for each role, the dashboard snapshot computed over them.
These files can be used for manual validation and testing.

Usage:
    python scripts/generate_sample_office.py
    python scripts/generate_sample_office.py --offices 3 --loans 50 --as-of 2024-06-15
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.metrics import compute_aggregate
from loan_ledger.logging import setup_logging
from loan_ledger.models import User, UserRole
from loan_ledger.scenarios import OfficePortfolioScenario
from loan_ledger.serialization import report_to_dict, summary_payload, to_dict
from loan_ledger.store import PortfolioStore

logger = logging.getLogger(__name__)


def save_json(data: object, filename: str, output_dir: Path) -> None:
    """Save data to JSON file."""
    filepath = output_dir / filename
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info("Saved %s", filepath)


def save_records(store: PortfolioStore, output_dir: Path) -> None:
    """Write every record kind to its own file."""
    save_json([to_dict(u) for u in store.users.values()], "users.json", output_dir)
    save_json([to_dict(i) for i in store.investors.values()], "investors.json", output_dir)
    save_json([to_dict(b) for b in store.borrowers.values()], "borrowers.json", output_dir)


def pick_callers(store: PortfolioStore) -> dict[str, User]:
    """One user per dashboard flavour: admin, first office manager, first investor."""
    callers: dict[str, User] = {}
    for role in (UserRole.SYSTEM_ADMIN, UserRole.OFFICE_MANAGER, UserRole.INVESTOR):
        user = next((u for u in store.users.values() if u.role == role), None)
        if user is not None:
            callers[role.value.lower()] = user
    return callers


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample office portfolio")
    parser.add_argument("--offices", type=int, default=2, help="Number of offices (default: 2)")
    parser.add_argument("--investors", type=int, default=5, help="Investors per office (default: 5)")
    parser.add_argument("--loans", type=int, default=20, help="Loans per office (default: 20)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Evaluation date, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=project_root / "local",
        help="Output directory (default: ./local)",
    )
    args = parser.parse_args()

    config = LedgerConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    output_dir: Path = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    as_of = args.as_of or date.today()

    scenario = OfficePortfolioScenario(
        num_offices=args.offices,
        investors_per_office=args.investors,
        loans_per_office=args.loans,
        seed=args.seed,
        as_of=as_of,
        config=config.profit,
    )
    store = scenario.generate()
    save_records(store, output_dir)

    borrowers = list(store.borrowers.values())
    investors = list(store.investors.values())
    users = list(store.users.values())
    for name, caller in pick_callers(store).items():
        metrics = compute_aggregate(caller, borrowers, investors, users, config.profit, as_of)
        save_json(report_to_dict(metrics), f"dashboard_{name}.json", output_dir)
        save_json(summary_payload(metrics), f"summary_{name}.json", output_dir)

    save_json(scenario.get_portfolio_summary(), "portfolio_summary.json", output_dir)
    logger.info("Store summary: %s", store.summary())


if __name__ == "__main__":
    main()
