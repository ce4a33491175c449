import pandas as pd
import pytest

from hotel_etl.quality import (
    ANOMALY_KINDS,
    UNPARSED_DATE,
    AnomalyPolicy,
    DataQualityError,
    DataQualityReport,
    apply_policy,
)


def test_default_policy_keeps_rows():
    policy = AnomalyPolicy()
    assert all(policy.action_for(kind) == 'default' for kind in ANOMALY_KINDS)


def test_strict_policy_raises_everywhere():
    policy = AnomalyPolicy.strict()
    assert all(policy.action_for(kind) == 'raise' for kind in ANOMALY_KINDS)


def test_invalid_action_rejected():
    with pytest.raises(ValueError):
        AnomalyPolicy(join_miss='ignore')


def test_apply_policy_actions():
    df = pd.DataFrame({'x': [1, 2, 3]})
    mask = pd.Series([False, True, False])

    report = DataQualityReport()
    kept = apply_policy(df, mask, UNPARSED_DATE, AnomalyPolicy(), report)
    assert len(kept) == 3
    assert report.anomalies == {UNPARSED_DATE: 1}

    dropped = apply_policy(df, mask, UNPARSED_DATE, AnomalyPolicy(unparsed_date='drop'), report)
    assert dropped['x'].tolist() == [1, 3]
    assert report.anomalies == {UNPARSED_DATE: 2}
    assert report.anomaly_dropped == {UNPARSED_DATE: 1}

    with pytest.raises(DataQualityError) as excinfo:
        apply_policy(df, mask, UNPARSED_DATE, AnomalyPolicy(unparsed_date='raise'), report)
    assert excinfo.value.kind == UNPARSED_DATE
    assert excinfo.value.count == 1


def test_no_flagged_rows_is_a_no_op():
    df = pd.DataFrame({'x': [1]})
    report = DataQualityReport()
    out = apply_policy(df, pd.Series([False]), UNPARSED_DATE, AnomalyPolicy.strict(), report)
    assert out is df
    assert report.anomalies == {}


def test_summary_prints_counts(capsys):
    report = DataQualityReport(raw_rows=1830, duplicates_removed=30, clean_rows=1790)
    report.record_imputed('daily_rate', 54)
    report.record_anomaly(UNPARSED_DATE, 2)
    report.print_summary()

    out = capsys.readouterr().out
    assert 'Raw rows:            1,830' in out
    assert 'Imputed daily_rate:  54' in out
    assert 'Anomaly unparsed_date: 2 (dropped 0)' in out
