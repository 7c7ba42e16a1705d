from datetime import datetime, timedelta, timezone

from app.utils.aggregation import (
    date_key,
    distribution,
    group_by_date,
    isoformat_utc,
    js_round,
    numeric_summary,
    sorted_by_date,
)


def test_isoformat_utc_naive_and_aware():
    assert isoformat_utc(datetime(2024, 3, 1, 9, 30)) == '2024-03-01T09:30:00.000Z'
    plus_two = timezone(timedelta(hours=2))
    assert isoformat_utc(datetime(2024, 3, 1, 11, 30, tzinfo=plus_two)) == '2024-03-01T09:30:00.000Z'
    assert isoformat_utc(None) is None


def test_date_key_uses_utc_day():
    plus_two = timezone(timedelta(hours=2))
    assert date_key(datetime(2024, 3, 2, 1, 0, tzinfo=plus_two)) == '2024-03-01'


def test_js_round_rounds_half_up():
    assert js_round(2.5) == 3
    assert js_round(2.49) == 2
    assert js_round(-2.5) == -2


def test_group_by_date_skips_missing_timestamps():
    items = [
        {'at': datetime(2024, 3, 1, 8)},
        {'at': None},
        {'at': datetime(2024, 3, 1, 20)},
        {'at': datetime(2024, 3, 2, 8)},
    ]
    groups = group_by_date(items, lambda item: item['at'])
    assert sorted(groups) == ['2024-03-01', '2024-03-02']
    assert len(groups['2024-03-01']) == 2


def test_distribution_fans_out_sequences():
    counts = distribution([['A', 'B'], 'A', None], lambda value: value)
    assert counts == {'A': 2, 'B': 1}


def test_numeric_summary_empty_input():
    assert numeric_summary([]) == {'count': 0, 'sum': 0, 'average': 0, 'mode': None}


def test_numeric_summary_average_and_mode():
    summary = numeric_summary([4, 5, 5, 3])
    assert summary['count'] == 4
    assert summary['average'] == 17 / 4
    assert summary['mode'] == 5


def test_numeric_summary_mode_tie_keeps_first_seen():
    assert numeric_summary([3, 5])['mode'] == 3


def test_sorted_by_date():
    entries = [{'date': '2024-03-02'}, {'date': '2024-02-28'}]
    assert [e['date'] for e in sorted_by_date(entries)] == ['2024-02-28', '2024-03-02']
