"""
build_fact.py
Assembles fact_bookings by swapping natural keys for dimension surrogate keys.

All joins are equality LEFT joins: a booking whose guest / room / channel / rate
code has no dimension row keeps a null foreign key instead of being dropped.
The date key is computed from the check-in date, not looked up.
"""

from hotel_etl.build_dimensions import to_date_key
from hotel_etl.quality import JOIN_MISS, AnomalyPolicy, DataQualityReport, apply_policy

KEY_COLUMNS = ['guest_key', 'room_key', 'date_key', 'channel_key', 'rate_key']

FACT_COLUMNS = [
    'fact_id', 'booking_id',
    'guest_key', 'room_key', 'date_key', 'channel_key', 'rate_key',
    'check_in_date', 'check_out_date', 'nights',
    'daily_rate', 'total_revenue', 'booking_lead_days', 'num_guests',
    'is_cancelled',
]


def left_join_key(fact, dim, key, dim_column, fact_column):
    """Attach `key` from `dim` where dim[dim_column] == fact[fact_column]."""
    lookup = dim[[key, dim_column]]
    if dim_column == fact_column:
        merged = fact.merge(lookup, on=fact_column, how='left')
    else:
        merged = fact.merge(lookup, left_on=fact_column, right_on=dim_column, how='left')
        merged = merged.drop(columns=[dim_column])
    merged[key] = merged[key].astype('Int64')
    return merged


def build_fact_bookings(clean, dims, policy=None, report=None):
    """One fact row per cleaned booking, in input order."""
    policy = policy or AnomalyPolicy()
    report = report if report is not None else DataQualityReport()
    print("\nBuilding fact_bookings...")

    fact = clean.reset_index(drop=True)
    fact = left_join_key(fact, dims['dim_guest'], 'guest_key', 'guest_name', 'guest_name')
    fact = left_join_key(fact, dims['dim_room'], 'room_key', 'room_type_code', 'room_type')
    fact['date_key'] = to_date_key(fact['check_in_date'])
    fact = left_join_key(fact, dims['dim_channel'], 'channel_key', 'channel_name', 'booking_channel')
    fact = left_join_key(fact, dims['dim_rate_code'], 'rate_key', 'rate_code', 'rate_code')

    for key in KEY_COLUMNS:
        fact = apply_policy(fact, fact[key].isna(), JOIN_MISS, policy, report,
                            detail=f"no dimension match for {key}")

    fact = fact.rename(columns={'confirmation_no': 'booking_id'}).reset_index(drop=True)
    fact['fact_id'] = range(1, len(fact) + 1)
    fact = fact[FACT_COLUMNS]

    print(f"  Booking records: {len(fact):,}")
    return fact
