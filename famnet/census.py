# dyad / triad / clique / cycle census
# counts the shapes that pairs, triples and bigger groups form in the graph

import math
from collections import Counter

import networkx as nx  # type: ignore

from famnet.constants import *
from famnet.graph_store import FamilyGraph, undirected_view

TRIAD_CLASSES = ['003', '012', '102', '021D', '021U', '021C', '111D', '111U',
                 '030T', '030C', '201', '120D', '120U', '120C', '210', '300']


def directed_view(graph, directed=False):
    """
    simple digraph for the census

    default follows the collapse policy: FamilyGraph gets collapsed like for
    every other metric, so each family tie is mutual.
    directed=True on a FamilyGraph -> parent ties stay one-way (parent -> child),
    spouse goes both ways
    """
    if isinstance(graph, FamilyGraph) and not directed:
        graph = undirected_view(graph)

    if isinstance(graph, FamilyGraph):
        D = nx.DiGraph()
        D.add_nodes_from(graph.G.nodes())
        for h, t, data in graph.G.edges(data=True):
            D.add_edge(h, t)
            if data.get('kind') == SPOUSE:
                D.add_edge(t, h)
        return D

    if graph.is_directed():
        D = nx.DiGraph()
        D.add_nodes_from(graph.nodes())
        D.add_edges_from((h, t) for h, t in graph.edges() if h != t)
        return D

    return nx.DiGraph(graph.to_directed())


def dyad_census(graph, directed=False):
    """every unordered pair is mutual, asymmetric or null. sums to C(N, 2)"""
    D = directed_view(graph, directed)
    n = D.number_of_nodes()

    mutual = 0
    asym = 0

    for h, t in D.edges():
        if D.has_edge(t, h):
            mutual += 1
        else:
            asym += 1

    # each mutual pair got counted from both ends
    mutual //= 2

    return {
        'mutual': mutual,
        'asymmetric': asym,
        'null': math.comb(n, 2) - mutual - asym,
    }


def triad_census(graph, directed=False):
    """16 MAN classes, sums to C(N, 3)"""
    D = directed_view(graph, directed)
    counts = nx.triadic_census(D)
    return {cls: counts.get(cls, 0) for cls in TRIAD_CLASSES}


def reciprocity(graph, directed=False):
    """share of directed ties that are returned. None if there are no ties"""
    D = directed_view(graph, directed)
    if D.number_of_edges() == 0:
        return None
    return nx.overall_reciprocity(D)


# ==================== CLIQUES ====================

def maximal_cliques(G):
    """
    every maximal clique (bron-kerbosch under the hood)

    sorted biggest first then by members so the listing is stable
    """
    U = undirected_view(G)
    cliques = [sorted(c) for c in nx.find_cliques(U)]
    return sorted(cliques, key=lambda c: (-len(c), c))


def largest_cliques(G):

    cliques = maximal_cliques(G)
    if not cliques:
        return []
    size = len(cliques[0])
    return [c for c in cliques if len(c) == size]


def clique_count(G, min_size=1):
    return sum(1 for c in maximal_cliques(G) if len(c) >= min_size)


def clique_size_distribution(G):
    return dict(Counter(len(c) for c in maximal_cliques(G)))


# ==================== CYCLES ====================

def girth(G):
    """length of the shortest cycle, math.inf for a forest"""
    U = undirected_view(G)
    basis = nx.minimum_cycle_basis(U)
    if not basis:
        return math.inf
    return min(len(c) for c in basis)


def cycle_census(G):
    """
    cyclomatic number + length distribution of a minimum cycle basis

    a pure family tree has no cycles, marriages between relatives
    (or two parents with shared kids) are what closes them
    """
    U = undirected_view(G)
    basis = nx.minimum_cycle_basis(U)
    lengths = Counter(len(c) for c in basis)

    return {
        'cyclomatic_number': U.number_of_edges() - U.number_of_nodes() + nx.number_connected_components(U),
        'basis_lengths': dict(lengths),
        'girth': min(lengths) if lengths else math.inf,
        'is_forest': not basis,
    }
