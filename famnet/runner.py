# runs every metric on the family graph and prints what came out.
# usage: python -m famnet.runner nodes.csv edges.csv [top_n] [-v]

import logging
import sys

from famnet import census, community_detection, metrics, reporter
from famnet.constants import *
from famnet.data_loader import FamilyTableLoader
from famnet.exceptions import ConvergenceError, FamnetError, InvalidArgumentError
from famnet.graph_store import build

logger = logging.getLogger(__name__)


# per-person metrics, name -> function(undirected graph, **kwargs)
METRICS = {
    'degree': metrics.degree,
    'closeness': metrics.closeness,
    'betweenness': metrics.betweenness,
    'eigenvector': metrics.eigenvector_centrality,
    'pagerank': metrics.pagerank,
    'hub_score': metrics.hub_score,
    'authority_score': metrics.authority_score,
    'transitivity': metrics.local_transitivity,
    'coreness': metrics.coreness,
}


def compute_metrics(graph, names=None, config=None):
    """
    runs the chosen metrics one by one

    config = {metric name: kwargs}. a metric that doesnt converge is logged
    and listed in failures, the rest still run.
    returns (records, failures)
    """
    names = list(METRICS) if names is None else list(names)
    config = config or {}

    unknown = [n for n in names if n not in METRICS]
    if unknown:
        raise InvalidArgumentError("unknown metric", details=', '.join(unknown))

    U = graph.undirected() if hasattr(graph, 'undirected') else graph

    records = {}
    failures = {}

    for name in names:
        try:
            records[name] = METRICS[name](U, **config.get(name, {}))
        except ConvergenceError as e:
            logger.warning("%s failed: %s", name, e)
            failures[name] = str(e)

    return records, failures


def compute_graph_metrics(graph):
    """graph-level numbers: census, cliques, cycles, distances"""
    U = graph.undirected() if hasattr(graph, 'undirected') else graph

    return {
        'summary': metrics.summary(U),
        'transitivity': metrics.transitivity(U),
        'average_clustering': metrics.average_clustering(U),
        'diameter': metrics.diameter(U),
        'diameter_largest_family': metrics.diameter(U, largest_component_only=True),
        'farthest_pair': metrics.farthest_pair(U),
        'dyad_census': census.dyad_census(graph),
        'triad_census': census.triad_census(graph),
        'reciprocity': census.reciprocity(graph),
        'parent_child_dyad_census': census.dyad_census(graph, directed=True),
        'parent_child_triad_census': census.triad_census(graph, directed=True),
        'largest_cliques': census.largest_cliques(U),
        'clique_sizes': census.clique_size_distribution(U),
        'cycles': census.cycle_census(U),
        'articulation_points': metrics.articulation_points(U),
    }


def run_all_metrics(nodes_path, edges_path, top=DEFAULT_TOP_N, community_method='edge_betweenness'):
    """run complete analysis"""

    # checked up front, nothing gets loaded or printed with a bad top
    if isinstance(top, bool) or not isinstance(top, int) or top <= 0:
        raise InvalidArgumentError("top must be a positive integer", details=repr(top))

    print("=" * 60)
    print("FAMILY NETWORK METRICS")
    print("=" * 60)

    print("\nLoading data...")
    loader = FamilyTableLoader(nodes_path, edges_path)
    node_rows, edge_rows = loader.load()

    graph = build(node_rows, edge_rows)
    print(f"people: {graph.number_of_nodes()}, ties: {len(edge_rows)}, houses: {len(loader.houses)}")

    records, failures = compute_metrics(graph)
    graph_level = compute_graph_metrics(graph)

    partition, community_eval = community_detection.detect(graph, community_method)
    records['community'] = partition

    table = reporter.merge(graph, records)

    _print_graph_level(graph_level)

    print(f"\n=== COMMUNITIES ({community_method}) ===")
    print(f"communities: {community_eval['n_communities']}, sizes: {community_eval['sizes'][:10]}")
    if community_eval['modularity'] is not None:
        print(f"modularity: {community_eval['modularity']:.4f}")

    print("\n=== TOP PEOPLE PER METRIC ===")
    for name, record in records.items():
        if name == 'community':
            continue
        print(f"\n{name}:")
        for person, score in reporter.top_n(record, top):
            print(f"    {person}: {score:.4f}")

    if failures:
        print("\nFAILED METRICS:")
        for name, reason in failures.items():
            print(f"  {name}: {reason}")

    print("\n" + "=" * 60)
    print("ANALYSIS COMPLETE")
    print("=" * 60)

    return {
        'graph': graph,
        'records': records,
        'failures': failures,
        'graph_level': graph_level,
        'communities': community_eval,
        'table': table,
    }


def _print_graph_level(gl):

    s = gl['summary']

    print("\n=== BASIC GRAPH STATS ===")
    print(f"nodes: {s['n_nodes']}")
    print(f"edges (undirected): {s['n_edges']}")
    print(f"density: {s['density']:.6f}")
    print(f"avg degree: {s['avg_degree']:.2f}")
    print(f"components: {s['n_components']} (largest {s['largest_component']}, isolated {s['isolated']})")

    print("\n=== DISTANCES ===")
    print(f"diameter: {gl['diameter']}")
    print(f"diameter (largest family): {gl['diameter_largest_family']}")
    if gl['farthest_pair']:
        u, v, d = gl['farthest_pair']
        print(f"farthest apart: {u} <-> {v} ({d} hops)")
    if s['mean_distance'] is not None:
        print(f"mean distance: {s['mean_distance']:.2f}")

    print("\n=== CLUSTERING ===")
    print(f"transitivity: {gl['transitivity']:.4f}")
    if gl['average_clustering'] is not None:
        print(f"avg local clustering: {gl['average_clustering']:.4f}")

    print("\n=== CENSUS ===")
    print(f"dyads: {gl['dyad_census']}")
    print(f"dyads (parent -> child kept one-way): {gl['parent_child_dyad_census']}")
    print(f"triads (non-zero): {({k: v for k, v in gl['triad_census'].items() if v})}")
    print(f"largest cliques: {gl['largest_cliques']}")
    print(f"clique sizes: {gl['clique_sizes']}")
    print(f"cycles: {gl['cycles']}")
    print(f"articulation points: {len(gl['articulation_points'])}")


def main(argv=None):

    argv = list(sys.argv[1:] if argv is None else argv)

    verbose = '-v' in argv or '--verbose' in argv
    argv = [a for a in argv if a not in ('-v', '--verbose')]

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if len(argv) < 2:
        print("usage: famnet NODES_CSV EDGES_CSV [TOP_N] [-v]")
        return 2

    top = DEFAULT_TOP_N
    if len(argv) > 2:
        try:
            top = int(argv[2])
        except ValueError:
            top = 0
        if top <= 0:
            print(f"bad TOP_N {argv[2]!r}, needs a positive integer")
            print("usage: famnet NODES_CSV EDGES_CSV [TOP_N] [-v]")
            return 2

    try:
        run_all_metrics(argv[0], argv[1], top=top)
    except FamnetError as e:
        print(f"error: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
