# builds the family graph once and hands out the views the metrics need.
# nothing in here computes a metric.

import logging
from collections import Counter

import networkx as nx  # type: ignore
import numpy as np  # pyright: ignore[reportMissingImports]

from famnet.constants import *
from famnet.exceptions import ValidationError

logger = logging.getLogger(__name__)


class FamilyGraph:
    """
    the directed multigraph straight from the tables + node/edge records

    G keeps every tie (mother, father, spouse) with its display attributes.
    treat it as read-only after build(), metrics never touch it
    """

    def __init__(self, G, node_records, edge_records):
        self.G = G
        self.node_records = node_records
        self.edge_records = edge_records
        self._undirected = None

    @property
    def nodes(self):
        return sorted(self.G.nodes())

    def number_of_nodes(self):
        return self.G.number_of_nodes()

    def undirected(self):
        # cached, the family graph doesnt change after build
        if self._undirected is None:
            self._undirected = to_undirected(self)
        return self._undirected

    def __contains__(self, name):
        return name in self.G

    def __len__(self):
        return self.G.number_of_nodes()


def build(nodes, edges):
    """
    validates the two tables and builds a FamilyGraph

    everything is checked before the graph object exists, so a bad table
    never leaves a half registered graph around
    """
    node_records = [dict(n) for n in nodes]
    edge_records = [dict(e) for e in edges]

    names = [n.get('name') for n in node_records]

    if any(not name for name in names):
        raise ValidationError("node row without a name")

    dupes = sorted(name for name, c in Counter(names).items() if c > 1)
    if dupes:
        raise ValidationError("duplicate node ids", details=', '.join(dupes))

    known = set(names)

    for i, e in enumerate(edge_records):
        src, tgt, kind = e.get('source'), e.get('target'), e.get('kind')

        dangling = [x for x in (src, tgt) if x not in known]
        if dangling:
            raise ValidationError(f"edge {i} references unknown node", details=', '.join(map(str, dangling)))

        if src == tgt:
            raise ValidationError(f"edge {i} is a self-loop", details=src)

        if kind not in RELATION_KINDS:
            raise ValidationError(f"edge {i} has unknown relationship kind", details=repr(kind))

    G = nx.MultiDiGraph()

    for n in node_records:
        attrs = {k: v for k, v in n.items() if k != 'name'}
        G.add_node(n['name'], **attrs)

    for e in edge_records:
        G.add_edge(e['source'], e['target'], key=e['kind'],
                   kind=e['kind'], color=e.get('color'), line_style=e.get('line_style'))

    logger.debug("built family graph: %d nodes, %d directed ties", G.number_of_nodes(), G.number_of_edges())

    return FamilyGraph(G, node_records, edge_records)


def to_undirected(graph):
    """
    one simple undirected edge per family pair

    every kind seen between the pair (either direction) is kept on the edge
    as 'kinds' for display, structure only sees a single connection
    """
    if isinstance(graph, nx.Graph) and not graph.is_directed() and not graph.is_multigraph():
        return graph

    MG = graph.G if isinstance(graph, FamilyGraph) else graph

    U = nx.Graph()
    U.add_nodes_from(MG.nodes(data=True))

    seen = {}

    for h, t, data in MG.edges(data=True):
        kind = data.get('kind')
        if kind is not None and kind not in SYMMETRIC_KINDS:
            continue
        pair = frozenset((h, t))
        seen.setdefault(pair, []).append((kind, data.get('color'), data.get('line_style')))

    for pair, ties in seen.items():
        u, v = sorted(pair)
        ties = sorted(set(ties), key=lambda x: tuple('' if a is None else str(a) for a in x))
        U.add_edge(u, v,
                   kinds=tuple(k for k, c, s in ties),
                   colors=tuple(c for k, c, s in ties),
                   line_styles=tuple(s for k, c, s in ties))

    return U


def adjacency(graph, nodelist=None, weighted=False):
    """
    square matrix over the undirected view, returns (matrix, node order)

    default order is sorted node ids so two runs line up. weighted=True puts
    the number of distinct kinds between the pair instead of 1
    """
    U = undirected_view(graph)

    if nodelist is None:
        nodelist = sorted(U.nodes())
    else:
        nodelist = list(nodelist)
        missing = [n for n in nodelist if n not in U]
        if missing or len(set(nodelist)) != len(U):
            raise ValidationError("nodelist does not match the graph nodes")

    if weighted:
        W = nx.Graph()
        W.add_nodes_from(U.nodes())
        for u, v, data in U.edges(data=True):
            W.add_edge(u, v, weight=len(set(data.get('kinds', ()))) or 1)
        A = nx.to_numpy_array(W, nodelist=nodelist, weight='weight')
    else:
        A = nx.to_numpy_array(U, nodelist=nodelist, weight=None)

    return A, nodelist


def edges_from_adjacency(A, nodelist):

    A = np.asarray(A)
    rows, cols = np.nonzero(A)

    return {frozenset((nodelist[i], nodelist[j])) for i, j in zip(rows, cols) if i != j}


def connection_set(graph):
    U = undirected_view(graph)
    return {frozenset((u, v)) for u, v in U.edges()}


def families(G_undirected):
    """connected components, biggest family first"""
    comps = [set(c) for c in nx.connected_components(G_undirected)]
    return sorted(comps, key=lambda c: (-len(c), min(c)))


def largest_component(G_undirected):

    if G_undirected.number_of_nodes() == 0:
        return G_undirected.copy()
    return G_undirected.subgraph(families(G_undirected)[0]).copy()


def kinds_subgraph(graph, kinds):
    """undirected view using only some relationship kinds (parent tree, marriages...)"""
    kinds = set(kinds)
    unknown = kinds - RELATION_KINDS
    if unknown:
        raise ValidationError("unknown relationship kinds", details=', '.join(sorted(unknown)))

    U = undirected_view(graph)
    S = nx.Graph()
    S.add_nodes_from(U.nodes(data=True))
    for u, v, data in U.edges(data=True):
        if kinds & set(data.get('kinds', ())):
            S.add_edge(u, v, **data)
    return S


def undirected_view(graph):
    if isinstance(graph, FamilyGraph):
        return graph.undirected()
    return to_undirected(graph)
