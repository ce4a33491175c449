"""
quality.py
Data quality bookkeeping for the booking ETL.

Every anomaly found while cleaning is classified by an AnomalyPolicy:
  - 'default': keep the fallback value (cancellation -> False, date -> NaT, ...)
  - 'drop':    remove the affected rows
  - 'raise':   stop the pipeline with a DataQualityError

The default policy keeps everything ('default'), which reproduces the PMS
export cleaning rules. Counts are accumulated in a DataQualityReport.
"""

from dataclasses import dataclass, field
from typing import Dict

UNPARSED_DATE = 'unparsed_date'
UNKNOWN_CANCELLATION = 'unknown_cancellation'
UNKNOWN_RATE_LOOKUP = 'unknown_rate_lookup'
JOIN_MISS = 'join_miss'

ANOMALY_KINDS = (UNPARSED_DATE, UNKNOWN_CANCELLATION, UNKNOWN_RATE_LOOKUP, JOIN_MISS)

DEFAULT = 'default'
DROP = 'drop'
RAISE = 'raise'
ACTIONS = (DEFAULT, DROP, RAISE)


class DataQualityError(Exception):
    """Raised when an anomaly is classified as unrecoverable."""

    def __init__(self, kind, count, detail=''):
        self.kind = kind
        self.count = count
        message = f"{count:,} row(s) with anomaly '{kind}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class MissingColumnsError(DataQualityError):
    """Raw export does not carry the expected column set."""

    def __init__(self, missing):
        self.missing = sorted(missing)
        super().__init__('missing_columns', len(self.missing), ', '.join(self.missing))


@dataclass(frozen=True)
class AnomalyPolicy:
    unparsed_date: str = DEFAULT
    unknown_cancellation: str = DEFAULT
    unknown_rate_lookup: str = DEFAULT
    join_miss: str = DEFAULT

    def __post_init__(self):
        for kind in ANOMALY_KINDS:
            action = getattr(self, kind)
            if action not in ACTIONS:
                raise ValueError(f"Unknown action '{action}' for {kind}; expected one of {ACTIONS}")

    def action_for(self, kind):
        return getattr(self, kind)

    @classmethod
    def strict(cls):
        """Every anomaly stops the run."""
        return cls(**{kind: RAISE for kind in ANOMALY_KINDS})


@dataclass
class DataQualityReport:
    """Per-run counters, filled in stage by stage."""
    raw_rows: int = 0
    duplicates_removed: int = 0
    imputed: Dict[str, int] = field(default_factory=dict)
    validation_dropped: int = 0
    anomalies: Dict[str, int] = field(default_factory=dict)
    anomaly_dropped: Dict[str, int] = field(default_factory=dict)
    guest_collisions: int = 0
    guest_keep: str = 'first'
    clean_rows: int = 0

    def record_anomaly(self, kind, count):
        self.anomalies[kind] = self.anomalies.get(kind, 0) + int(count)

    def record_imputed(self, column, count):
        self.imputed[column] = self.imputed.get(column, 0) + int(count)

    def record_dropped(self, kind, count):
        self.anomaly_dropped[kind] = self.anomaly_dropped.get(kind, 0) + int(count)

    def print_summary(self):
        print("\n=== DATA QUALITY REPORT ===")
        print(f"Raw rows:            {self.raw_rows:,}")
        print(f"Duplicates removed:  {self.duplicates_removed:,}")
        for column, count in self.imputed.items():
            print(f"Imputed {column + ':':<13}{count:,}")
        print(f"Failed validation:   {self.validation_dropped:,}")
        for kind in ANOMALY_KINDS:
            if self.anomalies.get(kind):
                dropped = self.anomaly_dropped.get(kind, 0)
                print(f"Anomaly {kind}: {self.anomalies[kind]:,} (dropped {dropped:,})")
        if self.guest_collisions:
            print(f"Guest name collisions: {self.guest_collisions:,} ({self.guest_keep} occurrence kept)")
        print(f"Clean rows:          {self.clean_rows:,}")


def apply_policy(df, mask, kind, policy, report, detail=''):
    """
    Record the rows flagged by `mask` and act on them according to `policy`.
    Returns the frame with flagged rows removed when the action is 'drop'.
    """
    count = int(mask.sum())
    if count == 0:
        return df
    report.record_anomaly(kind, count)
    action = policy.action_for(kind)
    if action == RAISE:
        raise DataQualityError(kind, count, detail)
    if action == DROP:
        report.record_dropped(kind, count)
        print(f"  > Dropped {count:,} rows with anomaly '{kind}'.")
        return df[~mask].copy()
    print(f"  ! Warning: {count:,} rows with anomaly '{kind}' kept with default values.")
    return df
