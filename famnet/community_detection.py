# this file is intentionally kept graph agnostic.
# runs on any undirected graph u throw at it (FamilyGraph gets collapsed first).

import logging
from collections import defaultdict

import networkx as nx  # type: ignore
import numpy as np  # pyright: ignore[reportMissingImports]
from community import community_louvain  # type: ignore

from famnet.exceptions import InvalidArgumentError, ValidationError
from famnet.graph_store import undirected_view

logger = logging.getLogger(__name__)


def edge_betweenness_communities(G, k=None, max_levels=50):
    """
    girvan-newman: keep cutting the highest betweenness edge

    k given -> first level with exactly k communities (or best if never hit).
    otherwise -> best modularity seen in the first max_levels splits
    """
    U = undirected_view(G)

    if k is not None and (not isinstance(k, int) or k <= 0):
        raise InvalidArgumentError("k must be a positive integer", details=repr(k))

    if U.number_of_nodes() == 0:
        return {}

    if U.number_of_edges() == 0:
        return _communities_to_dict([{n} for n in sorted(U.nodes())])

    # level 0 is the components themselves, girvan_newman starts after the first cut
    best_partition = [set(c) for c in nx.connected_components(U)]
    best_mod = nx.community.modularity(U, best_partition)

    if k is not None and len(best_partition) == k:
        return _communities_to_dict(best_partition)

    for i, communities in enumerate(nx.community.girvan_newman(U)):

        if k is not None and len(communities) == k:
            return _communities_to_dict(communities)

        mod = nx.community.modularity(U, communities)

        if mod > best_mod:
            best_mod = mod
            best_partition = communities

        if k is None and i >= max_levels:
            break

    return _communities_to_dict(best_partition)


def label_propagation(G):
    U = undirected_view(G)
    communities = nx.community.label_propagation_communities(U)
    return _communities_to_dict(communities)


def louvain(G, resolution=1.0, seed=42):

    U = undirected_view(G)

    if U.number_of_nodes() == 0:
        return {}
    if U.number_of_edges() == 0:
        # python-louvain divides by total weight, nothing to optimise anyway
        return _communities_to_dict([{n} for n in sorted(U.nodes())])

    return community_louvain.best_partition(U, resolution=resolution, random_state=seed)


ALGORITHMS = {
    'edge_betweenness': edge_betweenness_communities,
    'label_propagation': label_propagation,
    'louvain': louvain,
}


def detect(G, method='edge_betweenness', **kwargs):
    """returns (partition, evaluation) for the chosen algorithm"""

    if method not in ALGORITHMS:
        raise InvalidArgumentError("unknown community detection method",
                                   details=f"{method!r}, pick one of {', '.join(sorted(ALGORITHMS))}")

    U = undirected_view(G)
    partition = ALGORITHMS[method](U, **kwargs)
    metrics = evaluate(U, partition)

    logger.debug("%s: %d communities, modularity %s", method, metrics['n_communities'], metrics['modularity'])

    return partition, metrics


def evaluate(G, partition):
    """
    modularity + size stats for a node -> community id mapping

    the partition has to cover every node exactly once, a dict cant put a node
    in two places but it can forget one or invent one
    """
    U = undirected_view(G)

    nodes = set(U.nodes())
    assigned = set(partition)

    if assigned != nodes:
        missing = sorted(nodes - assigned)
        extra = sorted(map(str, assigned - nodes))
        raise ValidationError("partition is not a cover of the graph nodes",
                              details=f"missing={missing[:5]}, unknown={extra[:5]}")

    if not nodes:
        return {'modularity': None, 'n_communities': 0, 'sizes': [],
                'avg_size': None, 'min_size': 0, 'max_size': 0}

    community_sets = _partition_to_communities(partition)

    # modularity is undefined without edges (divides by m)
    mod = nx.community.modularity(U, community_sets) if U.number_of_edges() else None
    sizes = [len(c) for c in community_sets]

    return {
        'modularity': mod,
        'n_communities': len(community_sets),
        'sizes': sorted(sizes, reverse=True),
        'avg_size': float(np.mean(sizes)),
        'min_size': min(sizes),
        'max_size': max(sizes),
    }


def membership(partition):
    """community id -> sorted members, ids renumbered by biggest community first"""
    comms = _partition_to_communities(partition)
    return {cid: sorted(c) for cid, c in enumerate(comms)}


def _communities_to_dict(communities):
    # renumber so community 0 is the biggest, ties by smallest member
    ordered = sorted((set(c) for c in communities), key=lambda c: (-len(c), min(c)))
    result = {}
    for cid, comm in enumerate(ordered):
        for node in comm:
            result[node] = cid
    return result


def _partition_to_communities(partition):
    comms = defaultdict(set)
    for node, cid in partition.items():
        comms[cid].add(node)
    return sorted(comms.values(), key=lambda c: (-len(c), min(c)))
