# tests/conftest.py
# ------------------------------------------------------------
# Purpose: Shared synthetic trip data for unit and integration
#          tests. Everything is generated with a fixed seed so
#          the tests never need the real NYC dataset.
# ------------------------------------------------------------

import numpy as np
import pandas as pd
import pytest


# Neighborhood -> (borough, position along a line used to fake distances)
NHOODS = {
    'Chelsea': ('Manhattan', 0.0),
    'Midtown': ('Manhattan', 1.0),
    'SoHo': ('Manhattan', 2.5),
    'Harlem': ('Manhattan', 6.0),
    'Astoria': ('Queens', 9.0),
}

# Rows appended to the valid trips, each broken in exactly one way
N_INVALID = 5


def _make_raw_trips(n=300, seed=42):
    rng = np.random.RandomState(seed)
    names = list(NHOODS)

    pickup = rng.choice(names, n)
    dropoff = rng.choice(names, n)
    gap = np.array([abs(NHOODS[p][1] - NHOODS[d][1]) for p, d in zip(pickup, dropoff)])
    distance = (gap + rng.uniform(0.3, 1.0, n)).round(2)

    # One week starting on a Sunday, any hour of the day
    start = pd.Timestamp('2024-01-07 00:00:00')
    pickup_dt = start + pd.to_timedelta(rng.randint(0, 7 * 24 * 60, n), unit='min')
    duration_min = rng.randint(5, 45, n)
    dropoff_dt = pickup_dt + pd.to_timedelta(duration_min, unit='min')

    fare = (2.5 + 2.5 * distance).round(2)
    tip = (fare * rng.choice([0.0, 0.1, 0.15, 0.2], n)).round(2)

    trips = pd.DataFrame({
        'tpep_pickup_datetime': pickup_dt.strftime('%Y-%m-%d %H:%M:%S'),
        'tpep_dropoff_datetime': dropoff_dt.strftime('%Y-%m-%d %H:%M:%S'),
        'passenger_count': rng.randint(1, 4, n),
        'trip_distance': distance,
        'fare_amount': fare,
        'tip_amount': tip,
        'pickup_nhood': pickup,
        'dropoff_nhood': dropoff,
        'pickup_borough': [NHOODS[p][0] for p in pickup],
        'dropoff_borough': [NHOODS[d][0] for d in dropoff],
    })

    ok = trips.iloc[0].to_dict()
    invalid = []
    for change in [
        {'pickup_nhood': None},                                # no neighborhood
        {'trip_distance': 0.0},                                # zero distance
        {'tpep_dropoff_datetime': ok['tpep_pickup_datetime']}, # zero duration
        {'fare_amount': 0.0},                                  # no fare
        {'passenger_count': 0},                                # empty cab
    ]:
        row = dict(ok)
        row.update(change)
        invalid.append(row)

    return pd.concat([trips, pd.DataFrame(invalid)], ignore_index=True)


@pytest.fixture
def raw_trips():
    return _make_raw_trips()


@pytest.fixture
def three_nhood_trips():
    """
    3 neighborhoods with fixed pair counts (row totals 4, 4, 8; grand total 16):

            A   B   C
        A   2   1   1
        B   0   3   1
        C   2   0   6
    """
    counts = {
        ('A', 'A'): 2, ('A', 'B'): 1, ('A', 'C'): 1,
        ('B', 'B'): 3, ('B', 'C'): 1,
        ('C', 'A'): 2, ('C', 'C'): 6,
    }
    rows = []
    for (p, d), k in counts.items():
        rows.extend([(p, d)] * k)
    df = pd.DataFrame(rows, columns=['pickup_nhood', 'dropoff_nhood'])
    for col in ['pickup_nhood', 'dropoff_nhood']:
        df[col] = pd.Categorical(df[col], categories=['A', 'B', 'C'])
    # trip_distance = 1 within a neighborhood, 4 across
    df['trip_distance'] = np.where(df['pickup_nhood'].astype(str) == df['dropoff_nhood'].astype(str), 1.0, 4.0)
    return df


@pytest.fixture
def n_invalid():
    return N_INVALID
