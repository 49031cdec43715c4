"""
Cross-tabulation helpers for the NYC taxi neighborhood analysis
===============================================================

Small, pure functions used by nyc_taxi_analysis.py:
  1. crosstab_stats   : count / sum / mean of a column per category pair
  2. seriate          : reorder categories so similar ones sit next to each other
  3. percent_shares   : each cell's share of its row, its column and the grand total

Nothing here prints, writes files or modifies the DataFrames it receives.
"""

import numpy as np   # Matrix handling for the dissimilarity matrix
import pandas as pd  # Group-by aggregation and categorical levels

from scipy.cluster.hierarchy import leaves_list, linkage  # Hierarchical ordering
from scipy.spatial.distance import squareform             # Square matrix -> condensed form


# Tip classes used to colour the tip heatmap (upper bounds are inclusive)
TIP_BINS = [0, 8, 12, 15, 100]
TIP_LABELS = ['0-8%', '8-12%', '12-15%', '15%+']


def require_columns(df, columns):
    """
    Raise a KeyError naming every column of `columns` that df lacks.

    I check up front so a typo in a column name fails with one clear message
    instead of a pandas traceback from deep inside a groupby.
    """
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"Missing required column(s): {', '.join(missing)}")


# ══════════════════════════════════════════════════════════════════════════════
# AGGREGATION
# ══════════════════════════════════════════════════════════════════════════════

def crosstab_stats(df, row, col, value=None, observed=False):
    """
    Aggregate trips by a pair of categorical columns.

    With value=None this is a plain trip count per (row, col) pair. With a
    value column it returns the count of non-missing values, their sum and
    their mean, which is what a cross-tabulation of e.g. trip_distance by
    pickup_nhood x dropoff_nhood needs.

    When both keys are categorical and observed=False, every combination of
    levels is returned (empty pairs get count 0 and an undefined mean), in
    level order. Rows with a missing key are not counted.

    Args:
        df: Trip-level DataFrame
        row: Column used for the rows of the cross-tab (e.g. 'pickup_nhood')
        col: Column used for the columns of the cross-tab (e.g. 'dropoff_nhood')
        value: Optional numeric column to summarise
        observed: Passed to DataFrame.groupby for categorical keys
    Returns:
        pd.DataFrame: One row per pair with columns row, col, count[, sum, mean]
    """
    needed = [row, col] if value is None else [row, col, value]
    require_columns(df, needed)

    grouped = df.groupby([row, col], observed=observed, sort=True)   # observed=False keeps empty pairs

    if value is None:
        out = grouped.size().rename('count').reset_index()   # Plain trip count per pair
    else:
        out = grouped[value].agg(['count', 'sum', 'mean']).reset_index()   # count skips NaN values

    out['count'] = out['count'].astype('int64')
    return out


def fill_undefined(values):
    """Replace NaN entries with the mean of the defined entries."""
    if isinstance(values, (pd.Series, pd.DataFrame)):
        overall = np.nanmean(values.to_numpy(dtype=float)) if values.notna().to_numpy().any() else np.nan
        return values.fillna(overall)

    arr = np.asarray(values, dtype=float)
    if np.isnan(arr).all():
        return arr.copy()
    return np.where(np.isnan(arr), np.nanmean(arr), arr)


# ══════════════════════════════════════════════════════════════════════════════
# SERIATION
# ══════════════════════════════════════════════════════════════════════════════

def level_list(series):
    """
    The levels of a column in their analysis order: the categories of a
    categorical (which may have been seriated), otherwise the sorted values.
    """
    if isinstance(series.dtype, pd.CategoricalDtype):
        return list(series.cat.categories)
    return sorted(series.dropna().unique().tolist())


def dissimilarity_matrix(stats, row, col, value='mean', levels=None):
    """
    Turn a pair table into a square, symmetric dissimilarity matrix.

    Pairs with no trips have an undefined mean; those cells are filled with
    the overall mean before the matrix is symmetrised, then the diagonal is
    set to zero.

    Args:
        stats: Output of crosstab_stats
        row, col: The pair columns in stats
        value: Column holding the dissimilarity (mean trip distance by default)
        levels: Optional explicit level order for both axes
    Returns:
        pd.DataFrame: Square matrix indexed and labelled by level
    """
    require_columns(stats, [row, col, value])

    if levels is None:
        levels = level_list(stats[row])
        levels += [lev for lev in level_list(stats[col]) if lev not in levels]

    # Plain object keys so the pivot is not expanded over unused categories
    flat = stats[[row, col, value]].astype({row: object, col: object})
    grid = flat.pivot_table(index=row, columns=col, values=value,
                            aggfunc='mean', dropna=False)
    grid = grid.reindex(index=levels, columns=levels).astype(float)

    filled = fill_undefined(grid).to_numpy()
    sym = (filled + filled.T) / 2                           # A->B and B->A count as one distance
    np.fill_diagonal(sym, 0.0)
    return pd.DataFrame(sym, index=grid.index, columns=grid.columns)


def seriate(dissimilarity):
    """
    Order the categories of a square dissimilarity matrix so that similar
    categories end up adjacent.

    Average-linkage hierarchical clustering with optimal leaf ordering; the
    leaf order of the dendrogram is the seriation.

    Returns:
        np.ndarray: A permutation of range(n)
    """
    d = np.asarray(dissimilarity, dtype=float)
    if d.ndim != 2 or d.shape[0] != d.shape[1]:
        raise ValueError(f"Dissimilarity matrix must be square, got shape {d.shape}")
    if np.isnan(d).any():
        raise ValueError("Dissimilarity matrix contains undefined (NaN) entries")
    if (d < 0).any():
        raise ValueError("Dissimilarity matrix contains negative entries")

    n = d.shape[0]
    if n <= 2:
        return np.arange(n)

    d = (d + d.T) / 2
    np.fill_diagonal(d, 0.0)
    # Optimal leaf ordering flips subtrees so adjacent leaves are as close as possible
    Z = linkage(squareform(d, checks=False), method='average', optimal_ordering=True)
    return leaves_list(Z).astype(int)


def seriated_levels(dissimilarity):
    """Labels of a DataFrame dissimilarity matrix in seriated order."""
    order = seriate(dissimilarity)
    return [dissimilarity.index[i] for i in order]


def reorder_levels(df, columns, levels):
    """
    Return a copy of df where each of `columns` is a categorical with the
    given level order. Values outside `levels` raise ValueError.
    """
    require_columns(df, columns)
    out = df.copy()
    for column in columns:
        present = set(out[column].dropna().unique())
        unknown = present - set(levels)
        if unknown:
            raise ValueError(f"{column} has values not in the new level order: {sorted(map(str, unknown))}")
        out[column] = pd.Categorical(out[column].astype(object), categories=list(levels))
    return out


# ══════════════════════════════════════════════════════════════════════════════
# PERCENTAGES & JOINS
# ══════════════════════════════════════════════════════════════════════════════

def percent_shares(table, row, col, value='count'):
    """
    Add each cell's share (in %) of the grand total, of its row total and of
    its column total as pct_all, pct_by_row and pct_by_col.

    A group whose total is zero has no defined share, so its cells get NaN.
    """
    require_columns(table, [row, col, value])
    out = table.copy()
    vals = out[value].astype(float)

    total = vals.sum()                                           # Grand total for pct_all
    row_total = vals.groupby(out[row], observed=False).transform('sum')   # Same length as out, one total per cell
    col_total = vals.groupby(out[col], observed=False).transform('sum')

    out['pct_all'] = vals / total * 100 if total > 0 else np.nan
    out['pct_by_row'] = vals / row_total.where(row_total > 0) * 100
    out['pct_by_col'] = vals / col_total.where(col_total > 0) * 100
    return out


def join_crosstabs(tables, row, col, column='mean', how='inner'):
    """
    Join several pair tables on (row, col).

    Args:
        tables: dict mapping output column name -> crosstab_stats result,
                e.g. {'tip_percent': tips, 'fare_per_minute': fares}
        column: Which column to take from each table
        how: Merge strategy passed to DataFrame.merge
    """
    if not tables:
        raise ValueError("join_crosstabs needs at least one table")

    joined = None
    for name, table in tables.items():
        require_columns(table, [row, col, column])
        part = table[[row, col, column]].rename(columns={column: name})
        joined = part if joined is None else joined.merge(part, on=[row, col], how=how)
    return joined.reset_index(drop=True)


def bin_tip_percent(series):
    """Bucket tip percentages into the tip classes used for colouring."""
    return pd.cut(series, bins=TIP_BINS, labels=TIP_LABELS, include_lowest=True)
