import csv
import logging

from famnet.constants import *
from famnet.exceptions import ValidationError

logger = logging.getLogger(__name__)

# csv.DictReader parks fields beyond the header under this key
EXTRA_FIELDS = '__extra__'


class FamilyTableLoader:
    """
    reads the two curated tables (characters + family ties)

    no checking of who references who here, graph_store.build does that.
    this only makes sure the columns are there and the types are sane
    """

    def __init__(self, nodes_path: str, edges_path: str):

        self.nodes_path = nodes_path
        self.edges_path = edges_path
        self.node_rows = []
        self.edge_rows = []
        self.houses = set()
        self.kinds = set()

    def load(self):

        self.node_rows = [self._clean_node(row) for row in _read_table(self.nodes_path, REQUIRED_NODE_COLUMNS)]
        self.edge_rows = [self._clean_edge(row) for row in _read_table(self.edges_path, REQUIRED_EDGE_COLUMNS)]

        for row in self.node_rows:
            if row.get('house'):
                self.houses.add(row['house'])

        for row in self.edge_rows:
            self.kinds.add(row['kind'])

        logger.debug("loaded %d nodes and %d edges", len(self.node_rows), len(self.edge_rows))

        return self.node_rows, self.edge_rows

    def _clean_node(self, row):

        node = {col: _blank_to_none(row.get(col)) for col in NODE_COLUMNS}

        # keep any extra columns, someone might have added a 'title' or so
        for col, val in row.items():
            if col not in node:
                node[col] = _blank_to_none(val)

        node['gender'] = _to_gender(node['gender'], node['name'])
        node['popularity'] = _to_popularity(node['popularity'], node['name'])

        return node

    def _clean_edge(self, row):

        edge = {col: _blank_to_none(row.get(col)) for col in EDGE_COLUMNS}
        if edge['kind'] is not None:
            edge['kind'] = edge['kind'].lower()
        return edge


def _read_table(path, required):

    with open(path, 'r', newline='', encoding='utf-8') as f:

        reader = csv.DictReader(f, restkey=EXTRA_FIELDS)
        header = set(reader.fieldnames or [])
        missing = required - header

        if missing:
            raise ValidationError(f"{path} is missing columns", details=', '.join(sorted(missing)))

        rows = []

        for row in reader:
            if EXTRA_FIELDS in row:
                raise ValidationError(f"{path} line {reader.line_num} has more fields than the header",
                                      details=repr(row[EXTRA_FIELDS]))
            if any((v or '').strip() for v in row.values()):
                rows.append(row)

        return rows


def _blank_to_none(value):

    if value is None:
        return None
    value = value.strip()
    return value if value else None


def _to_gender(value, name):

    if value is None:
        return None
    try:
        # gender comes as "1" or "1.0" depending on who exported the table
        flag = float(value)
    except ValueError as e:
        raise ValidationError(f"bad gender value for {name}", details=repr(value)) from e

    if flag not in GENDER_LABELS:
        raise ValidationError(f"gender for {name} must be one of {sorted(GENDER_LABELS)}", details=repr(value))

    return int(flag)


def _to_popularity(value, name):

    if value is None:
        return None
    try:
        score = float(value)
    except ValueError as e:
        raise ValidationError(f"bad popularity value for {name}", details=repr(value)) from e

    if not 0.0 <= score <= 1.0:
        raise ValidationError(f"popularity for {name} is outside [0, 1]", details=repr(value))

    return score
