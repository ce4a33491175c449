"""
config.py
Fixed configuration for the hotel booking star schema.

Holds the file locations, the analysis year and the reference tables
(rack rates, rate-code discounts, room / channel / rate-code catalogues).
The tables are bundled into an immutable ReferenceTables object that is
passed explicitly to the imputation rules and the dimension builders.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Tuple

# --- CONFIGURATION ---
RAW_DIR = Path("data/raw")
PROCESSED_DIR = Path("data/processed")
RAW_FILE = RAW_DIR / "hotel_bookings_raw.csv"
ANALYSIS_YEAR = 2025

RAW_COLUMNS = [
    'confirmation_no', 'guest_name', 'loyalty_tier', 'room_type', 'rate_code',
    'check_in_date', 'check_out_date', 'nights', 'daily_rate', 'total_revenue',
    'booking_channel', 'cancellation_flag', 'guest_type', 'num_guests',
    'booking_lead_days',
]
TEXT_COLUMNS = [
    'confirmation_no', 'guest_name', 'loyalty_tier', 'room_type', 'rate_code',
    'check_in_date', 'check_out_date', 'booking_channel', 'cancellation_flag',
    'guest_type',
]
# Only these strings mean "missing" in the raw export; 'None' is a real tier.
NA_VALUES = ['', 'NA']

DEFAULT_LOYALTY_TIER = 'None'
CANCELLED_VALUES = frozenset({'y', 'yes', '1'})
NOT_CANCELLED_VALUES = frozenset({'n', 'no', '0'})
DATE_FORMATS = ('%Y-%m-%d', '%m/%d/%Y')

# (code, name, rack rate, floor category, max occupancy)
ROOM_TYPES = (
    ('STD', 'Standard Queen', 189, 'Standard', 2),
    ('KNG', 'King Room', 219, 'Standard', 2),
    ('DBL', 'Double Queen', 199, 'Standard', 4),
    ('JRS', 'Junior Suite', 289, 'Premium', 3),
    ('STE', 'Executive Suite', 399, 'Premium', 4),
)

# (code, description, nominal discount %, multiplier used for imputation)
RATE_CODES = (
    ('BAR', 'Best Available Rate', 0, 1.00),
    ('AAA', 'AAA Member Rate', 15, 0.85),
    ('GOV', 'Government Rate', 20, 0.80),
    ('CORP', 'Corporate Negotiated', 18, 0.82),
    ('PKG', 'Package Rate', 10, 0.90),
    ('DISC', 'Advance Discount', 25, 0.75),
)

# (name, category, commission %)
CHANNELS = (
    ('Direct Website', 'Direct', 0.0),
    ('OTA-Expedia', 'OTA', 0.18),
    ('OTA-Booking.com', 'OTA', 0.15),
    ('GDS', 'Indirect', 0.10),
    ('Phone', 'Direct', 0.0),
    ('Walk-In', 'Direct', 0.0),
    ('Group', 'Group', 0.05),
)

SEASONS = {
    12: 'Winter', 1: 'Winter', 2: 'Winter',
    3: 'Spring', 4: 'Spring', 5: 'Spring',
    6: 'Summer', 7: 'Summer', 8: 'Summer',
    9: 'Fall', 10: 'Fall', 11: 'Fall',
}


def _frozen(mapping):
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ReferenceTables:
    """Static lookup data shared by the imputation rules and the dimensions."""
    room_types: Tuple[tuple, ...] = ROOM_TYPES
    rate_codes: Tuple[tuple, ...] = RATE_CODES
    channels: Tuple[tuple, ...] = CHANNELS
    rack_rates: Mapping[str, float] = field(
        default_factory=lambda: _frozen((r[0], r[2]) for r in ROOM_TYPES))
    discount_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _frozen((r[0], r[3]) for r in RATE_CODES))

    @classmethod
    def from_catalogues(cls, room_types, rate_codes, channels=CHANNELS):
        """Build tables whose lookups are derived from the given catalogues."""
        room_types, rate_codes = tuple(room_types), tuple(rate_codes)
        return cls(
            room_types=room_types,
            rate_codes=rate_codes,
            channels=tuple(channels),
            rack_rates=_frozen((r[0], r[2]) for r in room_types),
            discount_multipliers=_frozen((r[0], r[3]) for r in rate_codes),
        )


DEFAULT_TABLES = ReferenceTables()
