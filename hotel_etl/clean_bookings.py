"""
clean_bookings.py
Cleaning pipeline for the raw PMS booking export.

CORE LOGIC:
1. Normalize: trim text, Title Case guest names, upper case room/rate codes,
   collapse the four cancellation encodings (Y/N, Yes/No, yes/no, 1/0) to a boolean,
   parse dates written either as YYYY-MM-DD or MM/DD/YYYY.
2. Deduplicate: exact field-for-field duplicates only, first occurrence wins.
   Runs after normalization (casing can't hide a duplicate) and before imputation
   (derived values can't create one).
3. Impute, in this order:
   - loyalty_tier -> 'None'
   - num_guests -> median of the values present before filling
   - nights -> ALWAYS check_out - check_in (the dates are trusted over the raw field)
   - daily_rate -> rack rate x rate-code discount
   - total_revenue -> daily_rate x nights
4. Validate: keep rows with daily_rate > 0 and nights > 0.
"""

import pandas as pd
import numpy as np

from hotel_etl.config import (
    CANCELLED_VALUES,
    DATE_FORMATS,
    DEFAULT_LOYALTY_TIER,
    DEFAULT_TABLES,
    NA_VALUES,
    NOT_CANCELLED_VALUES,
    RAW_COLUMNS,
    TEXT_COLUMNS,
)
from hotel_etl.quality import (
    UNKNOWN_CANCELLATION,
    UNKNOWN_RATE_LOOKUP,
    UNPARSED_DATE,
    AnomalyPolicy,
    DataQualityReport,
    MissingColumnsError,
    apply_policy,
)


def check_columns(df):
    """Raw column names must match exactly; order is irrelevant."""
    missing = set(RAW_COLUMNS) - set(df.columns)
    if missing:
        raise MissingColumnsError(missing)


def load_raw_bookings(path):
    """Loads the raw export keeping text columns as strings."""
    print(f"Loading raw bookings from {path}...")
    df = pd.read_csv(
        path,
        dtype={col: str for col in TEXT_COLUMNS},
        keep_default_na=False,
        na_values=NA_VALUES,
    )
    check_columns(df)
    print(f"  > Raw records loaded: {len(df):,}")
    return df


# --- 1. NORMALIZER ---

def normalize_text(df):
    """Trim every text column and standardize casing of names and codes."""
    df = df.copy()
    for col in TEXT_COLUMNS:
        if col in df.columns and not pd.api.types.is_numeric_dtype(df[col]):
            df[col] = df[col].str.strip()

    df['guest_name'] = df['guest_name'].str.title()
    df['room_type'] = df['room_type'].str.upper()
    df['rate_code'] = df['rate_code'].str.upper()
    return df


def parse_cancellation(series):
    """
    Maps the cancellation encodings to a boolean.
    Returns (is_cancelled, unknown_mask); unknown encodings default to False.
    """
    flag = series.astype('string').str.strip().str.lower()
    cancelled = flag.isin(sorted(CANCELLED_VALUES)).fillna(False).astype(bool)
    not_cancelled = flag.isin(sorted(NOT_CANCELLED_VALUES)).fillna(False).astype(bool)
    return cancelled, ~(cancelled | not_cancelled)


def parse_mixed_dates(series):
    """
    YYYY-MM-DD first, then MM/DD/YYYY; the first format that matches the
    whole value wins. Single-digit month and day parts are accepted.
    Anything matching neither becomes NaT.
    """
    text = series.astype(str).str.strip().where(series.notna())
    parsed = pd.to_datetime(text, format=DATE_FORMATS[0], errors='coerce')
    for fmt in DATE_FORMATS[1:]:
        parsed = parsed.fillna(pd.to_datetime(text, format=fmt, errors='coerce'))
    return parsed


def normalize_records(df, policy=None, report=None):
    """Runs the normalizer over the whole table. The input frame is not mutated."""
    policy = policy or AnomalyPolicy()
    report = report if report is not None else DataQualityReport()

    print("\nStep 1: Normalizing text, flags & dates...")
    df = normalize_text(df)

    # Cancellation flag -> is_cancelled, in the same column position
    is_cancelled, unknown = parse_cancellation(df['cancellation_flag'])
    df.insert(df.columns.get_loc('cancellation_flag'), 'is_cancelled', is_cancelled)
    df = df.drop(columns=['cancellation_flag'])
    df = apply_policy(df, unknown, UNKNOWN_CANCELLATION, policy, report)

    df['check_in_date'] = parse_mixed_dates(df['check_in_date'])
    df['check_out_date'] = parse_mixed_dates(df['check_out_date'])
    unparsed = df['check_in_date'].isna() | df['check_out_date'].isna()
    df = apply_policy(df, unparsed, UNPARSED_DATE, policy, report)

    print("  > Text trimmed, casing standardized, cancellation flag unified, dates parsed.")
    return df


# --- 2. DEDUPLICATOR ---

def deduplicate(df, report=None):
    """Drops rows identical in every field to an earlier row."""
    n_before = len(df)
    df = df.drop_duplicates(keep='first').reset_index(drop=True)
    removed = n_before - len(df)
    if report is not None:
        report.duplicates_removed += removed
    print(f"\nStep 2: Duplicates removed: {removed:,}")
    return df


# --- 3. IMPUTATION ENGINE ---

def fill_loyalty_tier(df, report):
    missing = df['loyalty_tier'].isna()
    df['loyalty_tier'] = df['loyalty_tier'].fillna(DEFAULT_LOYALTY_TIER)
    report.record_imputed('loyalty_tier', missing.sum())
    print(f"  > Missing loyalty_tier replaced with '{DEFAULT_LOYALTY_TIER}': {missing.sum():,}")
    return df


def fill_num_guests(df, report):
    # Median is taken once over the pre-imputation values
    missing = df['num_guests'].isna()
    median_guests = df['num_guests'].median()
    if pd.notna(median_guests):
        median_guests = int(round(median_guests))
    # Guest counts are whole numbers
    df['num_guests'] = df['num_guests'].fillna(median_guests).round().astype('Int64')
    report.record_imputed('num_guests', missing.sum())
    print(f"  > Missing num_guests replaced with median ({median_guests}): {missing.sum():,}")
    return df


def recompute_nights(df):
    """Nights always come from the dates; NaT on either side gives a missing count."""
    df['nights'] = (df['check_out_date'] - df['check_in_date']).dt.days.astype('Int64')
    return df


def impute_daily_rate(df, tables=DEFAULT_TABLES, policy=None, report=None):
    """Missing daily_rate = rack_rate[room_type] x discount[rate_code], 2 decimals."""
    policy = policy or AnomalyPolicy()
    report = report if report is not None else DataQualityReport()

    missing = df['daily_rate'].isna()
    rack = df['room_type'].map(dict(tables.rack_rates))
    discount = df['rate_code'].map(dict(tables.discount_multipliers))
    estimate = (rack.astype('float64') * discount.astype('float64')).round(2)

    fillable = missing & estimate.notna()
    df['daily_rate'] = df['daily_rate'].astype('float64')
    df.loc[fillable, 'daily_rate'] = estimate[fillable]
    report.record_imputed('daily_rate', fillable.sum())
    print(f"  > Missing daily_rate imputed from rack rate * discount: {fillable.sum():,}")

    unknown = missing & estimate.isna()
    return apply_policy(df, unknown, UNKNOWN_RATE_LOOKUP, policy, report,
                        detail='room_type or rate_code not in the reference tables')


def recompute_total_revenue(df, report):
    """Missing total_revenue = daily_rate x (recomputed) nights, 2 decimals."""
    missing = df['total_revenue'].isna()
    revenue = (df['daily_rate'] * df['nights'].astype('float64')).round(2)
    fillable = missing & revenue.notna()
    df['total_revenue'] = df['total_revenue'].astype('float64')
    df.loc[fillable, 'total_revenue'] = revenue[fillable]
    report.record_imputed('total_revenue', fillable.sum())
    print(f"  > Missing total_revenue recalculated: {fillable.sum():,}")
    return df


def impute_missing(df, tables=DEFAULT_TABLES, policy=None, report=None):
    """Applies the fill rules in order; later rules read earlier rules' output."""
    policy = policy or AnomalyPolicy()
    report = report if report is not None else DataQualityReport()

    print("\nStep 3: Imputing missing values...")
    df = df.copy()
    df = fill_loyalty_tier(df, report)
    df = fill_num_guests(df, report)
    df = recompute_nights(df)
    df = impute_daily_rate(df, tables, policy, report)
    df = recompute_total_revenue(df, report)
    return df


# --- 4. VALIDATOR ---

def validate_bookings(df, report=None):
    """Keeps rows with a positive rate and a positive night count."""
    valid_rate = df['daily_rate'].astype('float64').gt(0)
    valid_nights = df['nights'].astype('float64').gt(0)
    keep = np.asarray(valid_rate & valid_nights, dtype=bool)

    dropped = int((~keep).sum())
    if report is not None:
        report.validation_dropped += dropped
    print(f"\nStep 4: Rows failing validation (daily_rate <= 0 or nights <= 0): {dropped:,}")
    return df[keep].reset_index(drop=True)


def clean_bookings(raw, tables=DEFAULT_TABLES, policy=None, report=None):
    """Raw export -> cleaned booking records."""
    policy = policy or AnomalyPolicy()
    report = report if report is not None else DataQualityReport()

    check_columns(raw)
    report.raw_rows = len(raw)

    df = normalize_records(raw, policy, report)
    df = deduplicate(df, report)
    df = impute_missing(df, tables, policy, report)
    df = validate_bookings(df, report)

    report.clean_rows = len(df)
    print(f"\nCleaned records: {len(df):,}")
    return df
