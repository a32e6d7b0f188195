# standard graph theory metrics over the undirected family graph
#
# ASSUMPTION: every metric here runs on the collapsed undirected view.
# a FamilyGraph can be passed directly and gets collapsed first.
#
# NOTE: the family graph is NOT connected (several houses never marry into
# each other) so everything has to be fine with disconnected input. distances
# across families are infinite and just get left out.

import logging
import math

import networkx as nx  # type: ignore
from scipy.sparse.linalg import ArpackNoConvergence  # pyright: ignore[reportMissingImports]

from famnet.constants import *
from famnet.exceptions import ConvergenceError, InvalidArgumentError
from famnet.graph_store import largest_component, undirected_view

logger = logging.getLogger(__name__)


# ==================== DEGREE / CLOSENESS ====================

def degree(G, normalized=False):
    """distinct neighbours per node, parallel ties between the same pair count once"""
    U = undirected_view(G)
    n = U.number_of_nodes()

    result = {node: U.degree(node) for node in U.nodes()}

    if normalized:
        scale = 1.0 / (n - 1) if n > 1 else 0.0
        result = {node: d * scale for node, d in result.items()}

    return result


def closeness(G, normalized=False):
    """
    1 / (sum of distances to everyone you can reach)

    someone with no relatives in the table gets 0, not an error.
    normalized multiplies by (N-1) over the whole graph, not the component
    """
    U = undirected_view(G)
    n = U.number_of_nodes()

    result = {}

    for node in U.nodes():
        lengths = nx.single_source_shortest_path_length(U, node)
        total = sum(lengths.values())
        result[node] = 1.0 / total if total > 0 else 0.0

    if normalized and n > 1:
        result = {node: c * (n - 1) for node, c in result.items()}

    return result


# ==================== BETWEENNESS ====================

def betweenness(G, normalized=False):
    """
    sum over unordered pairs (s, t) of the share of shortest s-t paths through v

    ties in path counts get split fractionally (brandes), networkx already
    halves the ordered-pair counts for undirected graphs
    """
    U = undirected_view(G)
    return nx.betweenness_centrality(U, normalized=normalized)


def edge_betweenness(G, normalized=False):

    U = undirected_view(G)
    raw = nx.edge_betweenness_centrality(U, normalized=normalized)

    # edge ids are sorted tuples so (a, b) and (b, a) cant both show up
    return {tuple(sorted((u, v))): val for (u, v), val in raw.items()}


# ==================== SPECTRAL STUFF ====================

def eigenvector_centrality(G, max_iter=DEFAULT_MAX_ITER, tol=DEFAULT_TOL):
    """
    principal eigenvector of the adjacency matrix, scaled so the max is 1

    LIMITATION: power iteration, may not converge -> ConvergenceError.
    we dont silently fall back to pagerank, caller decides
    """
    U = undirected_view(G)
    _check_budget(max_iter, tol)

    if U.number_of_nodes() == 0:
        raise ConvergenceError("eigenvector centrality is undefined on an empty graph")

    try:
        raw = nx.eigenvector_centrality(U, max_iter=max_iter, tol=tol)
    except nx.PowerIterationFailedConvergence as e:
        raise ConvergenceError("eigenvector centrality did not converge",
                               details=f"max_iter={max_iter}") from e
    except nx.NetworkXPointlessConcept as e:
        raise ConvergenceError("eigenvector centrality is undefined on this graph") from e

    top = max(raw.values())
    if top <= 0:
        return {node: 0.0 for node in raw}

    return {node: val / top for node, val in raw.items()}


def pagerank(G, damping=DEFAULT_DAMPING, tol=DEFAULT_TOL, max_iter=DEFAULT_MAX_ITER):
    """random surfer over the undirected graph, every tie carries traffic both ways"""
    U = undirected_view(G)

    if not (0.0 < damping < 1.0):
        raise InvalidArgumentError("damping factor must be in (0, 1)", details=repr(damping))
    _check_budget(max_iter, tol)

    if U.number_of_nodes() == 0:
        return {}

    try:
        return nx.pagerank(U, alpha=damping, tol=tol, max_iter=max_iter)
    except nx.PowerIterationFailedConvergence as e:
        raise ConvergenceError("pagerank did not converge", details=f"max_iter={max_iter}") from e


def hits(G, max_iter=DEFAULT_MAX_ITER, tol=DEFAULT_TOL):
    """
    hub and authority scores. on an undirected graph these are the same
    vector but we return both so the output looks like the directed version
    """
    U = undirected_view(G)
    _check_budget(max_iter, tol)

    if U.number_of_nodes() == 0:
        return {}, {}

    if U.number_of_edges() == 0:
        # nothing to iterate on, everyone is equally (un)important
        flat = {node: 0.0 for node in U.nodes()}
        return flat, dict(flat)

    try:
        hubs, authorities = nx.hits(U, max_iter=max_iter, tol=tol)
    except (nx.PowerIterationFailedConvergence, ArpackNoConvergence) as e:
        raise ConvergenceError("hits did not converge", details=f"max_iter={max_iter}") from e

    return hubs, authorities


def hub_score(G, **kwargs):
    return hits(G, **kwargs)[0]


def authority_score(G, **kwargs):
    return hits(G, **kwargs)[1]


def _check_budget(max_iter, tol):
    if not isinstance(max_iter, int) or max_iter <= 0:
        raise InvalidArgumentError("max_iter must be a positive integer", details=repr(max_iter))
    if tol <= 0:
        raise InvalidArgumentError("tolerance must be positive", details=repr(tol))


# ==================== CLUSTERING / TRANSITIVITY ====================

def transitivity(G):
    """global: 3 * triangles / connected triples. 0.0 if there are no triples at all"""
    U = undirected_view(G)
    return nx.transitivity(U)


def local_transitivity(G):
    """
    per node share of closed triangles among neighbour pairs

    None for nodes with < 2 neighbours, networkx would say 0 there which
    reads like "checked and found nothing" when really nothing could be checked
    """
    U = undirected_view(G)
    clustering = nx.clustering(U)

    return {node: (clustering[node] if U.degree(node) >= 2 else None) for node in U.nodes()}


def average_clustering(G):

    values = [v for v in local_transitivity(G).values() if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


# ==================== DISTANCES ====================

def diameter(G, largest_component_only=False):
    """
    longest shortest path

    disconnected + not restricted -> math.inf (some pairs are unreachable).
    empty graph -> None
    """
    U = undirected_view(G)

    if U.number_of_nodes() == 0:
        return None

    if largest_component_only:
        U = largest_component(U)
    elif not nx.is_connected(U):
        return math.inf

    return nx.diameter(U)


def farthest_pair(G):
    """
    (u, v, length) for one longest shortest path in the largest family

    ties go to the lexicographically smallest pair so reruns agree
    """
    U = undirected_view(G)

    if U.number_of_nodes() == 0:
        return None

    L = largest_component(U)
    best = None

    for source in sorted(L.nodes()):
        lengths = nx.single_source_shortest_path_length(L, source)
        for target in sorted(lengths):
            if target <= source:
                continue
            d = lengths[target]
            if best is None or d > best[2]:
                best = (source, target, d)

    if best is None:
        # single node family
        only = next(iter(L.nodes()))
        return (only, only, 0)

    return best


def diameter_path(G):

    pair = farthest_pair(G)
    if pair is None:
        return []

    U = undirected_view(G)
    return nx.shortest_path(U, pair[0], pair[1])


def mean_distance(G):
    """average shortest path length over reachable pairs only"""
    U = undirected_view(G)

    total = 0
    pairs = 0

    for source, lengths in nx.all_pairs_shortest_path_length(U):
        for target, d in lengths.items():
            if target != source:
                total += d
                pairs += 1

    if pairs == 0:
        return None

    return total / pairs


def density(G):
    U = undirected_view(G)
    return nx.density(U)


# ==================== STRUCTURE ====================

def articulation_points(G):
    """people whose removal splits their family"""
    U = undirected_view(G)
    return sorted(nx.articulation_points(U))


def coreness(G):
    U = undirected_view(G)
    return nx.core_number(U)


def summary(G):

    U = undirected_view(G)
    n = U.number_of_nodes()
    m = U.number_of_edges()

    degrees = [d for _, d in U.degree()]
    comps = [len(c) for c in nx.connected_components(U)] if n else []

    return {
        'n_nodes': n,
        'n_edges': m,
        'density': nx.density(U) if n else 0.0,
        'avg_degree': sum(degrees) / n if n else 0.0,
        'max_degree': max(degrees) if degrees else 0,
        'n_components': len(comps),
        'largest_component': max(comps) if comps else 0,
        'isolated': sum(1 for d in degrees if d == 0),
        'transitivity': nx.transitivity(U),
        'mean_distance': mean_distance(U),
        'diameter': diameter(U),
    }
