"""
build_dimensions.py
Creates the dimension tables for the booking star schema.

dim_guest is derived from the cleaned bookings; dim_room, dim_date, dim_channel
and dim_rate_code come from fixed configuration only.
"""

import pandas as pd

from hotel_etl.config import ANALYSIS_YEAR, DEFAULT_TABLES, SEASONS

GUEST_COLUMNS = ['guest_name', 'loyalty_tier', 'guest_type']


def to_date_key(dates):
    """YYYYMMDD integer key; NaT gives a missing key."""
    key = dates.dt.year * 10000 + dates.dt.month * 100 + dates.dt.day
    return key.astype('Int64')


def add_surrogate_key(dim, key_name):
    dim = dim.reset_index(drop=True)
    dim.insert(0, key_name, range(1, len(dim) + 1))
    return dim


def find_guest_collisions(clean):
    """Names that appear with more than one (loyalty_tier, guest_type) combination."""
    guests = clean[GUEST_COLUMNS].dropna(subset=['guest_name']).drop_duplicates()
    counts = guests.groupby('guest_name', sort=False).size()
    return counts[counts > 1].index.tolist()


def build_dim_guest(clean, keep='first'):
    """
    One row per guest name, keyed in first-seen order.

    Guest identity is the name alone: two people sharing a name collapse into
    one row. `keep` chooses which occurrence supplies loyalty_tier/guest_type
    ('first' or 'last'); key order is always first appearance.
    """
    if keep not in ('first', 'last'):
        raise ValueError(f"keep must be 'first' or 'last', got {keep!r}")
    print("\nBuilding dim_guest...")

    guests = clean.loc[clean['guest_name'].notna(), GUEST_COLUMNS]
    first_seen = guests.drop_duplicates(subset='guest_name', keep='first')[['guest_name']]
    attributes = guests.drop_duplicates(subset='guest_name', keep=keep)
    dim = first_seen.merge(attributes, on='guest_name', how='left')
    dim = add_surrogate_key(dim, 'guest_key')

    print(f"  Unique guests: {len(dim):,}")
    return dim


def build_dim_room(tables=DEFAULT_TABLES):
    print("\nBuilding dim_room...")
    dim = pd.DataFrame(
        list(tables.room_types),
        columns=['room_type_code', 'room_type_name', 'rack_rate',
                 'floor_category', 'max_occupancy'],
    )
    dim = add_surrogate_key(dim, 'room_key')
    print(f"  Room types: {len(dim):,}")
    return dim


def build_dim_date(year=ANALYSIS_YEAR):
    """Calendar dimension covering every day of `year`."""
    print("\nBuilding dim_date...")
    dates = pd.date_range(start=f"{year}-01-01", end=f"{year}-12-31", freq='D')

    dim = pd.DataFrame({'full_date': dates})
    dim.insert(0, 'date_key', to_date_key(dim['full_date']).astype('int64'))
    dim['year'] = dim['full_date'].dt.year
    dim['quarter'] = dim['full_date'].dt.quarter
    dim['quarter_label'] = 'Q' + dim['quarter'].astype(str)
    dim['month'] = dim['full_date'].dt.month
    dim['month_name'] = dim['full_date'].dt.month_name()
    dim['month_abbr'] = dim['month_name'].str[:3]
    dim['day'] = dim['full_date'].dt.day
    dim['day_of_week'] = dim['full_date'].dt.day_name().str[:3]
    dim['is_weekend'] = dim['full_date'].dt.dayofweek.isin([5, 6])  # Sat, Sun
    dim['season'] = dim['month'].map(SEASONS)

    print(f"  Date range: {dates.min().date()} to {dates.max().date()}")
    print(f"  Total days: {len(dim):,}")
    return dim


def build_dim_channel(tables=DEFAULT_TABLES):
    print("\nBuilding dim_channel...")
    dim = pd.DataFrame(
        list(tables.channels),
        columns=['channel_name', 'channel_category', 'commission_pct'],
    )
    dim = add_surrogate_key(dim, 'channel_key')
    print(f"  Channels: {len(dim):,}")
    return dim


def build_dim_rate_code(tables=DEFAULT_TABLES):
    """Nominal discount_pct is descriptive; imputation uses the multipliers."""
    print("\nBuilding dim_rate_code...")
    dim = pd.DataFrame(
        [row[:3] for row in tables.rate_codes],
        columns=['rate_code', 'rate_description', 'discount_pct'],
    )
    dim = add_surrogate_key(dim, 'rate_key')
    print(f"  Rate codes: {len(dim):,}")
    return dim


def build_dimensions(clean, tables=DEFAULT_TABLES, year=ANALYSIS_YEAR, guest_keep='first'):
    return {
        'dim_guest': build_dim_guest(clean, keep=guest_keep),
        'dim_room': build_dim_room(tables),
        'dim_date': build_dim_date(year),
        'dim_channel': build_dim_channel(tables),
        'dim_rate_code': build_dim_rate_code(tables),
    }
