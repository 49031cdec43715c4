#!/usr/bin/env python3
"""
NYC Taxi Trips: Neighborhood Analysis Pipeline
==============================================
Dataset: NYC yellow-taxi trips with pickup/dropoff neighborhoods attached
         (prepared upstream, read here as CSV or Parquet)

The pipeline runs in 3 phases:
  1. Data Cleaning & Features : drop invalid trips, derive duration, tip %,
                                day-of-week and time-of-day bins
  2. Neighborhood Analysis    : cross-tabs by pickup x dropoff neighborhood,
                                seriated so similar neighborhoods sit together,
                                trip shares, tip % and fare per minute
  3. Time-of-Day Analysis     : traffic (trip duration), tipping and fares by
                                day of week x time of day

Every phase writes its heatmaps and a JSON summary to the output directory.
"""

# ── Standard library imports ──────────────────────────────────────────────────
import os            # File paths and output directory handling
import json          # Phase summaries (cleaning_summary.json, nhood_results.json, ...)
import argparse      # Command-line overrides for data path / output dir / borough
import warnings      # To silence pandas/numpy warnings on empty groups

# ── Third-party data science imports ──────────────────────────────────────────
import pandas as pd

# ── Visualization imports ─────────────────────────────────────────────────────
import matplotlib
matplotlib.use('Agg')                # Non-interactive backend, plots go straight to file
import matplotlib.pyplot as plt
import seaborn as sns                # Heatmaps

from datetime import datetime        # Pipeline timing

from taxi_crosstabs import (
    bin_tip_percent,
    crosstab_stats,
    dissimilarity_matrix,
    join_crosstabs,
    level_list,
    percent_shares,
    reorder_levels,
    require_columns,
    seriated_levels,
)

# Empty neighborhood pairs produce 0/0 means; those are expected here
warnings.filterwarnings('ignore')

# ── File Path Configuration ───────────────────────────────────────────────────
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_PATH = os.path.join(BASE_DIR, 'data', 'nyc_taxi_trips.csv')
OUTPUT_DIR = os.path.join(BASE_DIR, 'outputs')

# ── Cleaning thresholds ───────────────────────────────────────────────────────
MAX_DISTANCE_MILES = 500          # Longer "trips" are odometer/GPS errors
MAX_DURATION_SECONDS = 60 * 60 * 24

# ── Column names & category orders ────────────────────────────────────────────
PICKUP, DROPOFF = 'pickup_nhood', 'dropoff_nhood'
NHOOD_COLS = [PICKUP, DROPOFF]
DOW_ORDER = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
HOUR_LABELS = ['1AM-5AM', '5AM-9AM', '9AM-12PM', '12PM-4PM', '4PM-6PM', '6PM-10PM', '10PM-1AM']
# Hour 0 belongs with 10PM-1AM, so that label appears at both ends of the cut
HOUR_EDGES = [-1, 0, 4, 8, 11, 15, 17, 21, 23]

# ── Global Plot Styling (Dark Theme) ─────────────────────────────────────────
plt.rcParams.update({
    'figure.facecolor': '#0d1117',
    'axes.facecolor': '#161b22',
    'axes.edgecolor': '#30363d',
    'axes.labelcolor': '#c9d1d9',
    'text.color': '#c9d1d9',
    'xtick.color': '#8b949e',
    'ytick.color': '#8b949e',
    'grid.color': '#21262d',
    'figure.dpi': 150,
    'font.size': 11,
    'font.family': 'sans-serif',
})

COLORS = {
    'heatmap': 'YlOrRd',      # Counts and shares
    'diverging': 'RdYlBu_r',  # Durations and distances
    'tips': 'YlGn',           # Tip percentages
    'fares': 'PuBu',          # Fare amounts
}


# ══════════════════════════════════════════════════════════════════════════════
# PHASE 1 : DATA CLEANING & FEATURES
# ══════════════════════════════════════════════════════════════════════════════

def bin_hours(hours):
    """
    Map clock hours (0-23) onto the seven time-of-day labels in HOUR_LABELS.

    Returns:
        pd.Categorical: ordered, with HOUR_LABELS as categories
    """
    hours = pd.Series(hours, dtype=float)
    cut = pd.cut(hours, bins=HOUR_EDGES, labels=[HOUR_LABELS[-1]] + HOUR_LABELS, ordered=False)
    return pd.Categorical(cut.astype(object), categories=HOUR_LABELS, ordered=True)


def _json_number(value, ndigits=2):
    """Round a statistic for the JSON summaries; an undefined (NaN) value becomes None (null)."""
    if value is None or pd.isna(value):
        return None
    return round(float(value), ndigits)


def _add_time_columns(df, prefix):
    """
    Add {prefix}_dow and {prefix}_hour as ordered categories, in place.

    I only derive them from tpep_{prefix}_datetime when the upstream data
    doesn't already carry them. A numeric hour column (0-23) gets binned; a
    column that is already binned just becomes categorical.
    """
    dt_col = f'tpep_{prefix}_datetime'                           # e.g. tpep_pickup_datetime
    dow_col, hour_col = f'{prefix}_dow', f'{prefix}_hour'

    if dow_col not in df.columns and dt_col in df.columns:
        df[dow_col] = df[dt_col].dt.day_name().str[:3]           # 'Sunday' -> 'Sun'
    if dow_col in df.columns:
        # Ordered so groupby/heatmaps run Sun -> Sat instead of alphabetically
        df[dow_col] = pd.Categorical(df[dow_col].astype(object), categories=DOW_ORDER, ordered=True)

    if hour_col not in df.columns and dt_col in df.columns:
        df[hour_col] = df[dt_col].dt.hour                        # Clock hour 0-23, binned below
    if hour_col in df.columns:
        if pd.api.types.is_numeric_dtype(df[hour_col]):
            df[hour_col] = bin_hours(df[hour_col])
        df[hour_col] = pd.Categorical(df[hour_col].astype(object), categories=HOUR_LABELS, ordered=True)


def clean_trips(df):
    """
    Derive analysis columns and drop trips that can't be right.

    Derived (only when the upstream data doesn't already carry them):
      trip_duration   : seconds between pickup and dropoff
      tip_percent     : tip as a whole-number % of fare, missing when the fare
                        is not positive or the tip is outside [0, fare)
      *_dow, *_hour   : ordered day-of-week and time-of-day categories
    Always derived:
      fare_per_minute : fare_amount / duration in minutes

    The neighborhood columns end up as categoricals sharing one level set.

    Args:
        df: Raw trips DataFrame (not modified)
    Returns:
        tuple: (cleaned DataFrame, summary dict)
    """
    df = df.copy()                                               # Never touch the caller's frame
    raw_count = len(df)                                          # Kept to report how many rows were removed
    require_columns(df, NHOOD_COLS + ['trip_distance', 'fare_amount'])

    # ── 1a. Parse datetimes ────────────────────────────────────────────────
    for col in ['tpep_pickup_datetime', 'tpep_dropoff_datetime']:
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], errors='coerce')   # Unparseable -> NaT, filtered with duration

    # ── 1b. Trip duration & tip percent ────────────────────────────────────
    if 'trip_duration' not in df.columns:
        require_columns(df, ['tpep_pickup_datetime', 'tpep_dropoff_datetime'])
        df['trip_duration'] = (df['tpep_dropoff_datetime'] - df['tpep_pickup_datetime']).dt.total_seconds()

    if 'tip_percent' not in df.columns:
        require_columns(df, ['tip_amount'])
        # A tip only counts when the fare is positive and the tip is in [0, fare);
        # negative tips are refunds/adjustments, not tipping behaviour
        valid_tip = (
            (df['fare_amount'] > 0) &
            (df['tip_amount'] >= 0) &
            (df['tip_amount'] < df['fare_amount'])
        )
        df['tip_percent'] = (df['tip_amount'] * 100 / df['fare_amount']).round(0).where(valid_tip)

    # ── 1c. Day of week / time of day ──────────────────────────────────────
    _add_time_columns(df, 'pickup')
    _add_time_columns(df, 'dropoff')

    # ── 1d. Filter invalid trips ───────────────────────────────────────────
    before = len(df)
    df = df.dropna(subset=NHOOD_COLS)                            # Trips that couldn't be geocoded to a neighborhood
    print(f"  🗺  Removed {before - len(df):,} rows without a pickup/dropoff neighborhood")

    before = len(df)
    df = df[(df['trip_distance'] > 0) & (df['trip_distance'] <= MAX_DISTANCE_MILES)]
    print(f"  📏 Removed {before - len(df):,} rows with distance outside (0, {MAX_DISTANCE_MILES}] miles")

    before = len(df)
    df = df[(df['trip_duration'] > 0) & (df['trip_duration'] <= MAX_DURATION_SECONDS)]
    print(f"  ⏱  Removed {before - len(df):,} rows with duration outside (0, 24h]")

    before = len(df)
    df = df[df['fare_amount'] > 0]
    print(f"  💰 Removed {before - len(df):,} rows with non-positive fare")

    if 'passenger_count' in df.columns:
        before = len(df)
        df = df[df['passenger_count'] > 0]
        print(f"  🧍 Removed {before - len(df):,} rows with no passengers")

    df = df.copy()                                               # Detach from the filtered slice before adding a column
    df['fare_per_minute'] = df['fare_amount'] / (df['trip_duration'] / 60)   # Safe: duration > 0 after filtering

    # ── 1e. Shared neighborhood levels ─────────────────────────────────────
    # Same level set on both axes so the pickup x dropoff matrix is square
    levels = sorted(set(df[PICKUP].astype(object)) | set(df[DROPOFF].astype(object)), key=str)
    for col in NHOOD_COLS:
        df[col] = pd.Categorical(df[col].astype(object), categories=levels)
    df = df.reset_index(drop=True)

    cleaned_count = len(df)
    removed = raw_count - cleaned_count
    summary = {
        'raw_records': int(raw_count),
        'cleaned_records': int(cleaned_count),
        'records_removed': int(removed),
        'pct_removed': round(removed / raw_count * 100, 1) if raw_count else 0.0,
        'n_neighborhoods': len(levels),
    }
    if cleaned_count:
        summary.update({
            'fare_median': round(float(df['fare_amount'].median()), 2),
            'distance_median_miles': round(float(df['trip_distance'].median()), 2),
            'duration_median_seconds': round(float(df['trip_duration'].median()), 0),
            'tip_percent_mean': _json_number(df['tip_percent'].mean()),  # None when no trip has a valid tip
        })
    return df, summary


def load_and_clean_data(data_path=DATA_PATH, output_dir=OUTPUT_DIR):
    """
    Read the trips file (CSV or Parquet), clean it, and save cleaning_summary.json.

    Raises:
        FileNotFoundError: when data_path does not exist
    """
    print("\n" + "="*70)
    print("  PHASE 1 : DATA CLEANING & FEATURES")
    print("="*70)

    if not os.path.exists(data_path):
        raise FileNotFoundError(f"Trips file not found: {data_path}")

    if data_path.endswith('.parquet'):
        raw = pd.read_parquet(data_path)
    else:
        raw = pd.read_csv(data_path, low_memory=False)
    print(f"  📂 Loaded {len(raw):,} raw records ({len(raw.columns)} columns)")

    df, summary = clean_trips(raw)

    print(f"\n  ✅ Cleaning complete: {summary['cleaned_records']:,} rows retained "
          f"({summary['records_removed']:,} removed, {summary['pct_removed']}%)")
    print(f"  🏙  Neighborhoods: {summary['n_neighborhoods']}")

    os.makedirs(output_dir, exist_ok=True)
    with open(os.path.join(output_dir, 'cleaning_summary.json'), 'w') as f:
        json.dump(summary, f, indent=2, allow_nan=False)  # Strict JSON: undefined values must already be None

    return df


def subset_borough(df, borough):
    """Keep trips that start and end in `borough`, dropping unused neighborhoods."""
    require_columns(df, ['pickup_borough', 'dropoff_borough'])
    mask = (df['pickup_borough'] == borough) & (df['dropoff_borough'] == borough)
    out = df[mask].copy()

    used = set(out[PICKUP].astype(object)) | set(out[DROPOFF].astype(object))
    levels = [lev for lev in level_list(df[PICKUP]) if lev in used]
    for col in NHOOD_COLS:
        out[col] = pd.Categorical(out[col].astype(object), categories=levels)

    print(f"  🗽 {borough} only: {len(out):,} of {len(df):,} trips, {len(levels)} neighborhoods")
    return out.reset_index(drop=True)


# ══════════════════════════════════════════════════════════════════════════════
# HEATMAP OUTPUT
# ══════════════════════════════════════════════════════════════════════════════

def _save_heatmap(table, row, col, value, title, filename, output_dir,
                  cmap='YlOrRd', fmt='.1f', cbar_label=None, xlabel=None, ylabel=None):
    # Pivot in category order so seriated neighborhoods stay seriated on the plot
    flat = table[[row, col, value]].astype({row: object, col: object})
    grid = flat.pivot_table(index=row, columns=col, values=value, aggfunc='mean', dropna=False)
    grid = grid.reindex(index=level_list(table[row]), columns=level_list(table[col])).astype(float)
    if grid.empty or grid.isna().all().all():
        print(f"  ⚠️  Skipping {filename}: nothing to plot")
        return None

    n_rows, n_cols = grid.shape
    annot = max(n_rows, n_cols) <= 15                            # Cell labels only while they stay readable
    fig, ax = plt.subplots(figsize=(max(8, 0.5 * n_cols + 4), max(5, 0.4 * n_rows + 2)))   # Grow with the number of categories
    sns.heatmap(grid, cmap=cmap, ax=ax, linewidths=0.3, annot=annot, fmt=fmt,
                cbar_kws={'label': cbar_label or value})
    ax.set_xlabel(xlabel or col, fontsize=13, fontweight='bold')
    ax.set_ylabel(ylabel or row, fontsize=13, fontweight='bold')
    ax.set_title(title, fontsize=16, fontweight='bold', pad=15)
    plt.tight_layout()
    path = os.path.join(output_dir, filename)
    plt.savefig(path, bbox_inches='tight')
    plt.close(fig)                                               # Free memory, many figures per run
    return path


def _top_cell(table, value, row, col, largest=True):
    """Pick the (row, col) cell with the largest (or smallest) defined value, or None if there is none."""
    valid = table.dropna(subset=[value])                         # Empty pairs have no mean to compare
    if valid.empty:
        return None
    best = valid.loc[valid[value].idxmax() if largest else valid[value].idxmin()]
    return {row: str(best[row]), col: str(best[col]), value: _json_number(best[value])}


# ══════════════════════════════════════════════════════════════════════════════
# PHASE 2 : NEIGHBORHOOD ANALYSIS
# ══════════════════════════════════════════════════════════════════════════════

def run_neighborhood_analysis(df, output_dir=OUTPUT_DIR):
    """
    Cross-tabulate trips by pickup x dropoff neighborhood.

    Neighborhoods are first seriated on mean trip distance so that
    neighborhoods close to each other are adjacent on every heatmap. Then the
    trip counts are turned into shares (of all trips, of each pickup
    neighborhood, of each dropoff neighborhood) and joined with the average
    tip percent and fare per minute of each pair.

    Args:
        df: Cleaned trips (output of load_and_clean_data)
        output_dir: Where heatmaps, nhood_summary.parquet and nhood_results.json go
    Returns:
        tuple: (df with seriated neighborhood levels, results dict)
    """
    print("\n" + "="*70)
    print("  PHASE 2 : NEIGHBORHOOD ANALYSIS")
    print("="*70)
    os.makedirs(output_dir, exist_ok=True)

    results = {}

    # ── 2a. Mean distance & seriation ──────────────────────────────────────
    print("  🔀 Seriating neighborhoods on mean trip distance...")
    distance = crosstab_stats(df, PICKUP, DROPOFF, 'trip_distance')   # Mean distance = how "far apart" two neighborhoods are
    order = seriated_levels(dissimilarity_matrix(distance, PICKUP, DROPOFF))   # Empty pairs get the overall mean first
    df = reorder_levels(df, NHOOD_COLS, order)                   # Every later groupby / heatmap follows this order
    results['nhood_order'] = [str(lev) for lev in order]

    distance = crosstab_stats(df, PICKUP, DROPOFF, 'trip_distance')   # Recomputed so the grid follows the new order
    print("  📊 Plotting mean distance heatmap...")
    _save_heatmap(distance, PICKUP, DROPOFF, 'mean',
                  'Mean Trip Distance by Neighborhood Pair (miles)',
                  '01_nhood_mean_distance.png', output_dir,
                  cmap=COLORS['diverging'], cbar_label='Miles',
                  xlabel='Dropoff Neighborhood', ylabel='Pickup Neighborhood')

    # ── 2b. Trip counts & shares ───────────────────────────────────────────
    counts = percent_shares(crosstab_stats(df, PICKUP, DROPOFF), PICKUP, DROPOFF)
    share_plots = [
        ('pct_all', 'Share of All Trips (%)', '02_nhood_pct_all.png'),
        ('pct_by_row', 'Share of Trips from Each Pickup Neighborhood (%)', '03_nhood_pct_by_pickup.png'),
        ('pct_by_col', 'Share of Trips into Each Dropoff Neighborhood (%)', '04_nhood_pct_by_dropoff.png'),
    ]
    for value, title, filename in share_plots:
        print(f"  📊 Plotting {value} heatmap...")
        _save_heatmap(counts, PICKUP, DROPOFF, value, title, filename, output_dir,
                      cmap=COLORS['heatmap'], cbar_label='%',
                      xlabel='Dropoff Neighborhood', ylabel='Pickup Neighborhood')

    top = counts.nlargest(5, 'count')                            # Busiest pickup -> dropoff pairs
    results['top_pairs'] = [
        {'pickup': str(r[PICKUP]), 'dropoff': str(r[DROPOFF]),
         'count': int(r['count']), 'pct_all': _json_number(r['pct_all'])}
        for _, r in top.iterrows()
    ]

    # ── 2c. Tip percent & fare per minute ──────────────────────────────────
    tips = crosstab_stats(df, PICKUP, DROPOFF, 'tip_percent')
    fares = crosstab_stats(df, PICKUP, DROPOFF, 'fare_per_minute')
    summary = join_crosstabs({'tip_percent': tips, 'fare_per_minute': fares}, PICKUP, DROPOFF)
    summary = summary.merge(distance[[PICKUP, DROPOFF, 'mean']].rename(columns={'mean': 'mean_distance'}),
                            on=[PICKUP, DROPOFF], how='left')
    summary = summary.merge(counts[[PICKUP, DROPOFF, 'count', 'pct_all', 'pct_by_row', 'pct_by_col']],
                            on=[PICKUP, DROPOFF], how='left')
    summary['tip_class'] = bin_tip_percent(summary['tip_percent'])   # 0-8%, 8-12%, 12-15%, 15%+

    print("  📊 Plotting tip percent heatmap...")
    _save_heatmap(summary, PICKUP, DROPOFF, 'tip_percent',
                  'Average Tip Percent by Neighborhood Pair',
                  '05_nhood_tip_percent.png', output_dir,
                  cmap=COLORS['tips'], fmt='.0f', cbar_label='Tip %',
                  xlabel='Dropoff Neighborhood', ylabel='Pickup Neighborhood')

    summary.to_parquet(os.path.join(output_dir, 'nhood_summary.parquet'), index=False)

    results['overall_tip_percent'] = _json_number(df['tip_percent'].mean())  # None when no trip has a valid tip
    results['best_tipping_pair'] = _top_cell(summary, 'tip_percent', PICKUP, DROPOFF)
    results['priciest_pair_per_minute'] = _top_cell(summary, 'fare_per_minute', PICKUP, DROPOFF)
    results['tip_class_counts'] = {str(k): int(v) for k, v in
                                   summary['tip_class'].value_counts(sort=False).items()}

    with open(os.path.join(output_dir, 'nhood_results.json'), 'w') as f:
        json.dump(results, f, indent=2, allow_nan=False)  # Strict JSON: undefined values must already be None

    print(f"\n  ✅ Neighborhood analysis complete ({len(order)} neighborhoods)")
    print(f"  📈 Key findings:")
    print(f"     • Average tip: {results['overall_tip_percent']}%")
    if results['top_pairs']:
        busiest = results['top_pairs'][0]
        print(f"     • Busiest pair: {busiest['pickup']} → {busiest['dropoff']} ({busiest['pct_all']}% of trips)")

    return df, results


# ══════════════════════════════════════════════════════════════════════════════
# PHASE 3 : TIME-OF-DAY ANALYSIS
# ══════════════════════════════════════════════════════════════════════════════

def run_time_analysis(df, output_dir=OUTPUT_DIR):
    """
    Traffic, tipping and fare patterns by pickup day of week x time of day.

    I use mean trip duration as the traffic signal: the same trips take longer
    when the streets are congested. Each slot's share of its day's trips
    shows when demand peaks.

    Returns:
        dict: slowest_slot, best_tip_slot and busiest_slot (None when undefined)
    """
    print("\n" + "="*70)
    print("  PHASE 3 : TIME-OF-DAY ANALYSIS")
    print("="*70)
    os.makedirs(output_dir, exist_ok=True)

    dow, hour = 'pickup_dow', 'pickup_hour'
    results = {}

    # ── 3a. Traffic: mean trip duration ────────────────────────────────────
    duration = crosstab_stats(df, dow, hour, 'trip_duration')
    duration['mean_minutes'] = duration['mean'] / 60             # Seconds -> minutes for the plot
    print("  📊 Plotting trip duration heatmap...")
    _save_heatmap(duration, dow, hour, 'mean_minutes',
                  'Average Trip Duration (minutes) by Day & Time',
                  '06_time_trip_duration.png', output_dir,
                  cmap=COLORS['diverging'], cbar_label='Minutes',
                  xlabel='Time of Day', ylabel='Day of Week')
    results['slowest_slot'] = _top_cell(duration, 'mean_minutes', dow, hour)   # Worst traffic

    # ── 3b. Tipping ────────────────────────────────────────────────────────
    tips = crosstab_stats(df, dow, hour, 'tip_percent')
    print("  📊 Plotting tip percent heatmap...")
    _save_heatmap(tips, dow, hour, 'mean', 'Average Tip Percent by Day & Time',
                  '07_time_tip_percent.png', output_dir,
                  cmap=COLORS['tips'], cbar_label='Tip %',
                  xlabel='Time of Day', ylabel='Day of Week')
    results['best_tip_slot'] = _top_cell(tips, 'mean', dow, hour)

    # ── 3c. Fares ──────────────────────────────────────────────────────────
    fares = crosstab_stats(df, dow, hour, 'fare_amount')
    print("  📊 Plotting fare heatmap...")
    _save_heatmap(fares, dow, hour, 'mean', 'Average Fare ($) by Day & Time',
                  '08_time_fare_amount.png', output_dir,
                  cmap=COLORS['fares'], fmt='.2f', cbar_label='Fare ($)',
                  xlabel='Time of Day', ylabel='Day of Week')

    # ── 3d. Demand: share of each day's trips per time slot ────────────────
    counts = percent_shares(crosstab_stats(df, dow, hour), dow, hour)
    print("  📊 Plotting demand heatmap...")
    _save_heatmap(counts, dow, hour, 'pct_by_row', "Share of Each Day's Trips by Time of Day (%)",
                  '09_time_demand.png', output_dir,
                  cmap=COLORS['heatmap'], cbar_label='%',
                  xlabel='Time of Day', ylabel='Day of Week')
    results['busiest_slot'] = _top_cell(counts, 'pct_all', dow, hour)          # Largest share of all trips

    with open(os.path.join(output_dir, 'time_results.json'), 'w') as f:
        json.dump(results, f, indent=2, allow_nan=False)  # Strict JSON: undefined values must already be None

    print(f"\n  ✅ Time-of-day analysis complete")
    if results['slowest_slot']:
        slot = results['slowest_slot']
        print(f"     • Slowest traffic: {slot[dow]} {slot[hour]} ({slot['mean_minutes']} min)")

    return results


# ══════════════════════════════════════════════════════════════════════════════
# MAIN EXECUTION
# ══════════════════════════════════════════════════════════════════════════════

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='NYC taxi neighborhood analysis')
    parser.add_argument('--data', default=DATA_PATH, help='Trips file (.csv or .parquet)')
    parser.add_argument('--output-dir', default=OUTPUT_DIR, help='Where plots and results are written')
    parser.add_argument('--borough', default=None,
                        help="Only keep trips within one borough, e.g. 'Manhattan'")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    print("\n" + "★"*70)
    print("  NYC TAXI TRIPS: NEIGHBORHOOD ANALYSIS PIPELINE")
    print(f"  Dataset: {os.path.basename(args.data)}")
    print("★"*70)

    start_time = datetime.now()

    try:
        df = load_and_clean_data(args.data, args.output_dir)
    except FileNotFoundError as exc:
        print(f"  ❌ {exc}")
        return 1

    if args.borough:
        df = subset_borough(df, args.borough)
    if df.empty:
        print("  ❌ No trips left to analyse")
        return 1

    df, nhood_results = run_neighborhood_analysis(df, args.output_dir)
    time_results = run_time_analysis(df, args.output_dir)

    elapsed = (datetime.now() - start_time).total_seconds()
    print("\n" + "★"*70)
    print(f"  ✅ ALL PHASES COMPLETE in {elapsed:.1f} seconds")
    print(f"  📁 Output directory: {args.output_dir}")
    print(f"  📊 Generated files:")
    for f in sorted(os.listdir(args.output_dir)):
        size = os.path.getsize(os.path.join(args.output_dir, f))
        print(f"     • {f} ({size/1024:.0f} KB)")
    print("★"*70 + "\n")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
