import math

import networkx as nx
import pytest

from famnet import metrics
from famnet.exceptions import ConvergenceError, InvalidArgumentError
from famnet.graph_store import build, to_undirected
from tests.conftest import person, tie


class TestStar:
    """C connected to A, B and D, nothing else."""

    def test_degree(self, star):
        assert metrics.degree(star) == {'A': 1, 'B': 1, 'C': 3, 'D': 1}

    def test_normalized_degree(self, star):
        deg = metrics.degree(star, normalized=True)
        assert deg['C'] == pytest.approx(1.0)
        assert deg['A'] == pytest.approx(1 / 3)

    def test_betweenness(self, star):
        bc = metrics.betweenness(star)
        assert bc['C'] == pytest.approx(3.0)
        assert bc['A'] == bc['B'] == bc['D'] == 0

    def test_edge_betweenness(self, star):
        ebc = metrics.edge_betweenness(star)
        assert set(ebc) == {('A', 'C'), ('B', 'C'), ('C', 'D')}
        for value in ebc.values():
            assert value == pytest.approx(3.0)

    def test_transitivity(self, star):
        local = metrics.local_transitivity(star)
        assert local['C'] == 0
        assert local['A'] is None
        assert metrics.transitivity(star) == 0

    def test_diameter(self, star):
        assert metrics.diameter(star) == 2

    def test_closeness(self, star):
        cc = metrics.closeness(star)
        assert cc['C'] == pytest.approx(1 / 3)
        assert cc['A'] == pytest.approx(1 / 5)

    def test_normalized_closeness(self, star):
        cc = metrics.closeness(star, normalized=True)
        assert cc['C'] == pytest.approx(1.0)
        assert cc['A'] == pytest.approx(0.6)

    def test_mean_distance_and_density(self, star):
        assert metrics.mean_distance(star) == pytest.approx(1.5)
        assert metrics.density(star) == pytest.approx(0.5)

    def test_articulation_points(self, star):
        assert metrics.articulation_points(star) == ['C']

    def test_eigenvector_center_is_max(self, star):
        ev = metrics.eigenvector_centrality(star)
        assert ev['C'] == pytest.approx(1.0)
        assert all(0 < v < 1 for k, v in ev.items() if k != 'C')


class TestTriangle:

    def test_local_and_global_transitivity(self, triangle):
        assert metrics.local_transitivity(triangle) == {'A': 1.0, 'B': 1.0, 'C': 1.0}
        assert metrics.transitivity(triangle) == pytest.approx(1.0)
        assert metrics.average_clustering(triangle) == pytest.approx(1.0)

    def test_eigenvector_all_equal(self, triangle):
        ev = metrics.eigenvector_centrality(triangle)
        for value in ev.values():
            assert value == pytest.approx(1.0)

    def test_pagerank_uniform(self, triangle):
        pr = metrics.pagerank(triangle)
        for value in pr.values():
            assert value == pytest.approx(1 / 3)

    def test_hits_uniform(self, triangle):
        hubs, authorities = metrics.hits(triangle)
        for value in list(hubs.values()) + list(authorities.values()):
            assert value == pytest.approx(1 / 3)

    def test_coreness(self, triangle):
        assert metrics.coreness(triangle) == {'A': 2, 'B': 2, 'C': 2}


class TestSolvers:

    def test_eigenvector_empty_graph(self):
        with pytest.raises(ConvergenceError):
            metrics.eigenvector_centrality(nx.Graph())

    def test_eigenvector_iteration_cap(self, star):
        with pytest.raises(ConvergenceError):
            metrics.eigenvector_centrality(star, max_iter=1, tol=1e-12)

    def test_pagerank_iteration_cap(self, star):
        with pytest.raises(ConvergenceError):
            metrics.pagerank(star, max_iter=1, tol=1e-12)

    @pytest.mark.parametrize('damping', [0.0, 1.0, -0.2, 1.5])
    def test_pagerank_rejects_damping(self, star, damping):
        with pytest.raises(InvalidArgumentError):
            metrics.pagerank(star, damping=damping)

    def test_pagerank_rejects_bad_tolerance(self, star):
        with pytest.raises(InvalidArgumentError):
            metrics.pagerank(star, tol=0)

    def test_pagerank_sums_to_one(self, sample_graph):
        pr = metrics.pagerank(sample_graph, damping=0.9)
        assert sum(pr.values()) == pytest.approx(1.0)
        assert len(pr) == 16

    def test_eigenvector_on_disconnected_graph(self, sample_graph):
        ev = metrics.eigenvector_centrality(sample_graph)
        assert max(ev.values()) == pytest.approx(1.0)
        assert len(ev) == 16

    def test_hits_without_edges(self):
        G = nx.Graph()
        G.add_nodes_from(['A', 'B'])
        hubs, authorities = metrics.hits(G)
        assert hubs == {'A': 0.0, 'B': 0.0}
        assert authorities == hubs


class TestDisconnected:

    def test_diameter_unreachable(self, sample_graph):
        assert metrics.diameter(sample_graph) == math.inf

    def test_diameter_largest_family(self, sample_graph):
        assert metrics.diameter(sample_graph, largest_component_only=True) == 5

    def test_diameter_empty(self):
        assert metrics.diameter(nx.Graph()) is None

    def test_farthest_pair_is_deterministic(self, sample_graph):
        assert metrics.farthest_pair(sample_graph) == ('Jon Arryn', 'Talisa Maegyr', 5)
        path = metrics.diameter_path(sample_graph)
        assert path[0] == 'Jon Arryn'
        assert path[-1] == 'Talisa Maegyr'
        assert len(path) == 6

    def test_isolated_person_closeness_is_zero(self, sample_graph):
        assert metrics.closeness(sample_graph)['Podrick Payne'] == 0.0

    def test_isolated_person_degree(self, sample_graph):
        assert metrics.degree(sample_graph, normalized=True)['Podrick Payne'] == 0.0

    def test_mean_distance_without_pairs(self):
        G = nx.Graph()
        G.add_node('A')
        assert metrics.mean_distance(G) is None
        assert metrics.average_clustering(G) is None

    def test_summary(self, sample_graph):
        s = metrics.summary(sample_graph)
        assert s['n_nodes'] == 16
        assert s['n_edges'] == 20
        assert s['n_components'] == 3
        assert s['largest_component'] == 10
        assert s['isolated'] == 1
        assert s['diameter'] == math.inf


class TestProperties:

    def test_degree_matches_distinct_neighbours(self, sample_graph):
        U = to_undirected(sample_graph)
        deg = metrics.degree(sample_graph)
        for node in U:
            assert deg[node] == len(set(U.neighbors(node)))

    def test_degree_ignores_edge_order(self, sample_graph):
        reordered = build(list(sample_graph.node_records), list(reversed(sample_graph.edge_records)))
        assert metrics.degree(reordered) == metrics.degree(sample_graph)

    def test_parallel_kinds_count_once(self):
        g = build([person('A'), person('B')], [tie('A', 'B', 'father'), tie('B', 'A', 'spouse')])
        assert metrics.degree(g) == {'A': 1, 'B': 1}

    def test_betweenness_bounds(self, sample_graph):
        bc = metrics.betweenness(sample_graph)
        n = len(bc)
        assert all(v >= 0 for v in bc.values())
        assert sum(bc.values()) <= (n - 1) * (n - 2)

    def test_betweenness_splits_ties(self):
        # square A-B-D-C-A: two shortest A-D paths, via B and via C
        g = build([person(n) for n in 'ABCD'],
                  [tie('A', 'B'), tie('B', 'D'), tie('D', 'C', 'mother'), tie('C', 'A', 'spouse')])
        bc = metrics.betweenness(g)
        for value in bc.values():
            assert value == pytest.approx(0.5)

    def test_accepts_plain_networkx_graph(self):
        G = nx.path_graph(['A', 'B', 'C'])
        assert metrics.degree(G) == {'A': 1, 'B': 2, 'C': 1}
        assert metrics.betweenness(G)['B'] == pytest.approx(1.0)
