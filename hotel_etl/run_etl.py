"""
run_etl.py
Hotel booking ETL: raw PMS export -> star schema (1 fact + 5 dimensions).

Usage:
    python -m hotel_etl.run_etl

Reads data/raw/hotel_bookings_raw.csv and rebuilds every table in
data/processed/ from scratch on each run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pandas as pd

from hotel_etl.build_dimensions import build_dimensions, find_guest_collisions
from hotel_etl.build_fact import build_fact_bookings
from hotel_etl.clean_bookings import clean_bookings, load_raw_bookings
from hotel_etl.config import ANALYSIS_YEAR, DEFAULT_TABLES, PROCESSED_DIR, RAW_FILE
from hotel_etl.quality import AnomalyPolicy, DataQualityReport

TABLE_ORDER = ['fact_bookings', 'dim_guest', 'dim_room', 'dim_date', 'dim_channel', 'dim_rate_code']


@dataclass
class StarSchema:
    fact_bookings: pd.DataFrame
    dimensions: Dict[str, pd.DataFrame]
    report: DataQualityReport = field(default_factory=DataQualityReport)

    def tables(self):
        """All six tables keyed by name, fact first."""
        tables = {'fact_bookings': self.fact_bookings}
        tables.update(self.dimensions)
        return {name: tables[name] for name in TABLE_ORDER}


def run_pipeline(raw, tables=DEFAULT_TABLES, policy=None, year=ANALYSIS_YEAR, guest_keep='first'):
    """
    In-memory transform of a raw booking frame into the star schema.
    `guest_keep` picks which occurrence of a repeated guest name supplies
    loyalty_tier and guest_type in dim_guest.
    """
    policy = policy or AnomalyPolicy()
    report = DataQualityReport(guest_keep=guest_keep)

    clean = clean_bookings(raw, tables, policy, report)
    report.guest_collisions = len(find_guest_collisions(clean))

    print("\n" + "-" * 40)
    print("BUILDING STAR SCHEMA")
    print("-" * 40)
    dims = build_dimensions(clean, tables, year, guest_keep)
    fact = build_fact_bookings(clean, dims, policy, report)
    return StarSchema(fact_bookings=fact, dimensions=dims, report=report)


def save_star_schema(schema, out_dir=PROCESSED_DIR):
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = {}
    for name, table in schema.tables().items():
        paths[name] = out_dir / f"{name}.csv"
        table.to_csv(paths[name], index=False)
    print(f"\nAll {len(paths)} tables exported to {out_dir}/")
    return paths


def main():
    print("=" * 50)
    print("HOTEL REVENUE ANALYTICS - ETL PIPELINE")
    print("=" * 50)

    # 1. Extract
    raw = load_raw_bookings(RAW_FILE)

    # 2. Transform
    schema = run_pipeline(raw)

    # 3. Load
    save_star_schema(schema, PROCESSED_DIR)

    # 4. Summary
    print("\n" + "=" * 50)
    print("ETL PIPELINE COMPLETE")
    print("=" * 50)
    print("\nStar Schema Summary:")
    for name, table in schema.tables().items():
        print(f"  {name:<20} {len(table):,} rows")
    schema.report.print_summary()


if __name__ == "__main__":
    main()
