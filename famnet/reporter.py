# puts computed metrics back next to the people they belong to
# and pulls out top-N lists. nothing here computes a metric.

import math
import numbers

import pandas as pd

from famnet.constants import NODE_COLUMNS
from famnet.exceptions import InvalidArgumentError
from famnet.graph_store import FamilyGraph


def node_table(graph):
    """one row per person, sorted by name, straight from the loaded records"""

    if isinstance(graph, FamilyGraph):
        rows = [dict(r) for r in graph.node_records]
    else:
        rows = [{'name': n, **data} for n, data in graph.nodes(data=True)]

    frame = pd.DataFrame(rows)

    if frame.empty:
        frame = pd.DataFrame(columns=NODE_COLUMNS)

    for col in NODE_COLUMNS:
        if col not in frame.columns:
            frame[col] = None

    return frame.sort_values('name', kind='mergesort').reset_index(drop=True)


def merge(graph, metric_records):
    """
    left join every metric onto the node table

    people with no value for a metric keep their row, the cell is NaN
    (not applicable), never 0. records keyed by edge tuples are skipped,
    they dont belong in a per-person table
    """
    frame = node_table(graph)

    for metric_name, record in metric_records.items():

        if metric_name in frame.columns:
            raise InvalidArgumentError("metric name clashes with a node column", details=metric_name)

        values = {k: v for k, v in (record or {}).items() if not isinstance(k, tuple)}
        column = pd.DataFrame({'name': list(values), metric_name: list(values.values())}, columns=['name', metric_name])
        column[metric_name] = pd.to_numeric(column[metric_name], errors='coerce')

        frame = frame.merge(column, on='name', how='left')

    return frame


def top_n(metric_record, n):
    """
    highest values first, ties broken by id ascending

    None / NaN entries are not ranked. fewer defined values than n -> all of them
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n <= 0:
        raise InvalidArgumentError("n must be a positive integer", details=repr(n))

    defined = [(key, value) for key, value in metric_record.items() if _is_defined(value)]

    # id as string for the tie-break, keys can be names or edge tuples
    ranked = sorted(defined, key=lambda kv: (-kv[1], _sort_key(kv[0])))

    return ranked[:n]


def rank_all(metric_records, n):
    return {name: top_n(record, n) for name, record in metric_records.items()}


def to_rows(frame):
    """row-oriented export, NaN comes out as None"""
    clean = frame.astype(object).where(pd.notna(frame), None)
    return clean.to_dict(orient='records')


def write_csv(frame, path):
    frame.to_csv(path, index=False, na_rep='NA')
    return path


def _is_defined(value):
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return isinstance(value, numbers.Real)


def _sort_key(key):
    if isinstance(key, tuple):
        return tuple(str(k) for k in key)
    return (str(key),)
