# tests/integration/test_pipeline.py
# ------------------------------------------------------------
# Purpose: End-to-end run of the analysis pipeline on the small
#          synthetic dataset from conftest.py. Writes plots and
#          summaries into a pytest tmp_path; no real data needed.
# ------------------------------------------------------------

import json
import os

import pandas as pd
import pytest

from nyc_taxi_analysis import (
    clean_trips,
    load_and_clean_data,
    main,
    run_neighborhood_analysis,
    run_time_analysis,
)


pytestmark = pytest.mark.integration

EXPECTED_FILES = [
    'cleaning_summary.json',
    'nhood_results.json',
    'nhood_summary.parquet',
    'time_results.json',
    '01_nhood_mean_distance.png',
    '02_nhood_pct_all.png',
    '03_nhood_pct_by_pickup.png',
    '04_nhood_pct_by_dropoff.png',
    '05_nhood_tip_percent.png',
    '06_time_trip_duration.png',
    '07_time_tip_percent.png',
    '08_time_fare_amount.png',
    '09_time_demand.png',
]


@pytest.fixture
def trips_csv(tmp_path, raw_trips):
    path = tmp_path / 'trips.csv'
    raw_trips.to_csv(path, index=False)
    return str(path)


def test_main_writes_all_outputs(trips_csv, tmp_path):
    out = tmp_path / 'outputs'

    assert main(['--data', trips_csv, '--output-dir', str(out)]) == 0

    for name in EXPECTED_FILES:
        assert (out / name).exists(), name

    with open(out / 'nhood_results.json') as f:
        results = json.load(f)
    assert sorted(results['nhood_order']) == ['Astoria', 'Chelsea', 'Harlem', 'Midtown', 'SoHo']
    assert len(results['top_pairs']) == 5

    summary = pd.read_parquet(out / 'nhood_summary.parquet')
    assert len(summary) == 25
    assert summary['count'].sum() == 300
    assert summary['pct_all'].sum() == pytest.approx(100.0)


def test_manhattan_only_run(trips_csv, tmp_path):
    out = tmp_path / 'manhattan'

    assert main(['--data', trips_csv, '--output-dir', str(out), '--borough', 'Manhattan']) == 0

    with open(out / 'nhood_results.json') as f:
        results = json.load(f)
    assert 'Astoria' not in results['nhood_order']
    assert len(results['nhood_order']) == 4


def test_missing_data_file_returns_error(tmp_path):
    assert main(['--data', str(tmp_path / 'nope.csv'), '--output-dir', str(tmp_path / 'out')]) == 1


def test_parquet_input_and_seriated_levels(tmp_path, raw_trips):
    path = str(tmp_path / 'trips.parquet')
    raw_trips.to_parquet(path, index=False)
    out = str(tmp_path / 'out')

    df = load_and_clean_data(path, out)
    reordered, results = run_neighborhood_analysis(df, out)

    assert os.path.exists(os.path.join(out, 'cleaning_summary.json'))
    assert list(reordered['pickup_nhood'].cat.categories) == results['nhood_order']
    assert list(reordered['dropoff_nhood'].cat.categories) == results['nhood_order']
    assert len(reordered) == len(df)


def _strict_json(path):
    # Reject NaN / Infinity the way jq or a browser would
    def _reject(token):
        raise ValueError(f"non-standard JSON constant: {token}")

    with open(path) as f:
        return json.loads(f.read(), parse_constant=_reject)


def test_outputs_are_strict_json_when_no_trip_has_a_valid_tip(tmp_path, raw_trips):
    # Every tip is at least the fare, so no trip has a defined tip percent
    trips = raw_trips.assign(tip_amount=raw_trips['fare_amount'] + 1.0)
    path = str(tmp_path / 'trips.csv')
    trips.to_csv(path, index=False)
    out = tmp_path / 'outputs'

    assert main(['--data', path, '--output-dir', str(out)]) == 0

    cleaning = _strict_json(out / 'cleaning_summary.json')
    nhood = _strict_json(out / 'nhood_results.json')
    timing = _strict_json(out / 'time_results.json')

    assert cleaning['tip_percent_mean'] is None
    assert nhood['overall_tip_percent'] is None
    assert nhood['best_tipping_pair'] is None
    assert timing['best_tip_slot'] is None
    assert timing['slowest_slot'] is not None


def test_time_results_pick_the_known_slot(tmp_path):
    # Tuesday 4PM-6PM: 5 slow, well-tipped trips; 3 quick trips elsewhere
    def trip(pickup, minutes, tip):
        start = pd.Timestamp(pickup)
        return {
            'tpep_pickup_datetime': str(start),
            'tpep_dropoff_datetime': str(start + pd.Timedelta(minutes=minutes)),
            'passenger_count': 1,
            'trip_distance': 2.0,
            'fare_amount': 10.0,
            'tip_amount': tip,
            'pickup_nhood': 'Chelsea',
            'dropoff_nhood': 'SoHo',
        }

    rows = [trip('2024-01-09 17:00:00', 90, 3.0) for _ in range(5)]   # Tue 4PM-6PM
    rows += [
        trip('2024-01-07 08:00:00', 10, 1.0),                          # Sun 5AM-9AM
        trip('2024-01-10 13:00:00', 10, 1.0),                          # Wed 12PM-4PM
        trip('2024-01-12 20:00:00', 10, 1.0),                          # Fri 6PM-10PM
    ]
    df, _ = clean_trips(pd.DataFrame(rows))
    out = str(tmp_path / 'out')

    results = run_time_analysis(df, out)
    saved = _strict_json(os.path.join(out, 'time_results.json'))

    assert saved == results
    assert results['slowest_slot'] == {'pickup_dow': 'Tue', 'pickup_hour': '4PM-6PM', 'mean_minutes': 90.0}
    assert results['best_tip_slot'] == {'pickup_dow': 'Tue', 'pickup_hour': '4PM-6PM', 'mean': 30.0}
    assert results['busiest_slot'] == {'pickup_dow': 'Tue', 'pickup_hour': '4PM-6PM', 'pct_all': 62.5}
