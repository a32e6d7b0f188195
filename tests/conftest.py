"""
Shared fixtures: tiny hand-checkable graphs plus the sample tables under data/.
"""
from pathlib import Path

import pytest

from famnet.graph_store import build

DATA_DIR = Path(__file__).parent.parent / "data"


def person(name, **attrs):
    return {'name': name, **attrs}


def tie(source, target, kind='father', **attrs):
    return {'source': source, 'target': target, 'kind': kind, **attrs}


@pytest.fixture
def star_rows():
    """C in the middle, A, B, D hanging off it."""
    nodes = [person(n) for n in 'ABCD']
    edges = [tie('C', 'A'), tie('C', 'B', 'mother'), tie('C', 'D')]
    return nodes, edges


@pytest.fixture
def star(star_rows):
    return build(*star_rows)


@pytest.fixture
def triangle():
    nodes = [person(n) for n in 'ABC']
    edges = [tie('A', 'B', 'spouse'), tie('B', 'C', 'mother'), tie('C', 'A', 'father')]
    return build(nodes, edges)


@pytest.fixture
def two_triangles():
    """two families that never married into each other"""
    nodes = [person(n) for n in 'ABCDEF']
    edges = [
        tie('A', 'B', 'spouse'), tie('A', 'C'), tie('B', 'C', 'mother'),
        tie('D', 'E', 'spouse'), tie('D', 'F'), tie('E', 'F', 'mother'),
    ]
    return build(nodes, edges)


@pytest.fixture
def bridged_triangles(two_triangles):
    nodes = list(two_triangles.node_records)
    edges = list(two_triangles.edge_records) + [tie('C', 'D', 'spouse')]
    return build(nodes, edges)


@pytest.fixture
def sample_paths():
    return DATA_DIR / "nodes.csv", DATA_DIR / "edges.csv"


@pytest.fixture
def sample_graph(sample_paths):
    from famnet.data_loader import FamilyTableLoader

    node_rows, edge_rows = FamilyTableLoader(*map(str, sample_paths)).load()
    return build(node_rows, edge_rows)
