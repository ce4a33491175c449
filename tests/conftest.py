import pandas as pd
import pytest

BASE_BOOKING = {
    'confirmation_no': 'CF10000001',
    'guest_name': 'James Smith',
    'loyalty_tier': 'Gold',
    'room_type': 'STD',
    'rate_code': 'BAR',
    'check_in_date': '2025-03-05',
    'check_out_date': '2025-03-07',
    'nights': 2,
    'daily_rate': 189.0,
    'total_revenue': 378.0,
    'booking_channel': 'Direct Website',
    'cancellation_flag': 'N',
    'guest_type': 'Transient',
    'num_guests': 2.0,
    'booking_lead_days': 30,
}


@pytest.fixture
def make_raw():
    """Builds a raw export frame; each dict overrides fields of a valid booking."""
    def _make_raw(*overrides):
        rows = [{**BASE_BOOKING, **row} for row in overrides]
        df = pd.DataFrame(rows, columns=list(BASE_BOOKING))
        # Same numeric dtypes read_csv gives when a column has blanks
        return df.astype({'daily_rate': 'float64', 'total_revenue': 'float64', 'num_guests': 'float64'})
    return _make_raw


@pytest.fixture
def sample_raw(make_raw):
    return make_raw(
        {'confirmation_no': 'CF00000001', 'guest_name': 'MARY JOHNSON', 'room_type': 'kng',
         'rate_code': 'corp', 'daily_rate': None, 'total_revenue': None,
         'check_in_date': '01/10/2025', 'check_out_date': '2025-01-13',
         'booking_channel': '  OTA-Expedia ', 'cancellation_flag': 'Yes'},
        {'confirmation_no': 'CF00000002', 'guest_name': 'james smith', 'loyalty_tier': None,
         'num_guests': None, 'cancellation_flag': '0'},
        {'confirmation_no': 'CF00000002', 'guest_name': 'James Smith', 'loyalty_tier': None,
         'num_guests': None, 'cancellation_flag': '0'},
        {'confirmation_no': 'CF00000003', 'guest_name': 'Mary Johnson', 'loyalty_tier': 'Diamond',
         'room_type': 'STE', 'rate_code': 'DISC', 'daily_rate': 299.25, 'total_revenue': None,
         'check_in_date': '2025-07-19', 'check_out_date': '07/22/2025', 'nights': 5,
         'booking_channel': 'Fax', 'cancellation_flag': 'maybe', 'num_guests': 4.0},
        {'confirmation_no': 'CF00000004', 'daily_rate': 0.0, 'total_revenue': 0.0},
        {'confirmation_no': 'CF00000005', 'room_type': 'PENT', 'daily_rate': None},
    )
