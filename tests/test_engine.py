from __future__ import annotations

import pytest

from legis_graph.knowledge_graph.engine import GraphEngine
from legis_graph.knowledge_graph.models import Edge, EdgeType, Node, NodeType


def _node(node_id: str, node_type: NodeType = NodeType.MEMBER, **data) -> Node:
    return Node(id=node_id, type=node_type, label=node_id, data=data)


class TestMutation:
    def test_duplicate_edge_is_noop_but_other_type_is_kept(self):
        g = GraphEngine()
        g.add_node(_node("member:A"))
        g.add_node(_node("bill:B", NodeType.BILL))

        assert g.add_edge(Edge("member:A", "bill:B", EdgeType.SPONSORS, 3)) is True
        assert g.edge_count == 1
        # same triple, different weight: still the same logical edge
        assert g.add_edge(Edge("member:A", "bill:B", EdgeType.SPONSORS, 9)) is False
        assert g.edge_count == 1
        assert g.add_edge(Edge("member:A", "bill:B", EdgeType.COSPONSORS, 1)) is True
        assert g.edge_count == 2
        assert g.get_edges_from("member:A")[0].weight == 3

    def test_readding_node_replaces_attributes_and_keeps_edges(self, scenario_graph):
        scenario_graph.add_node(_node("member:A", party="R"))

        assert scenario_graph.get_node("member:A").data == {"party": "R"}
        assert len(scenario_graph.get_edges_from("member:A")) == 1
        assert scenario_graph.node_count == 2

    def test_adjacency_is_symmetric(self):
        g = GraphEngine()
        for i in range(5):
            g.add_node(_node(f"member:m{i}"))
        pairs = [(0, 1), (1, 2), (2, 0), (3, 4), (0, 4), (0, 1)]
        for s, t in pairs:
            g.add_edge(Edge(f"member:m{s}", f"member:m{t}", EdgeType.COSPONSORS))

        for i in range(5):
            nid = f"member:m{i}"
            for e in g.get_edges_from(nid):
                assert e in g.get_edges_to(e.target)
            for e in g.get_edges_to(nid):
                assert e in g.get_edges_from(e.source)

    def test_edge_between_unadded_ids_indexes_both_endpoints(self):
        g = GraphEngine()
        e = Edge("member:ghost", "bill:ghost", EdgeType.SPONSORS)
        assert g.add_edge(e)

        for nid in ("member:ghost", "bill:ghost"):
            assert nid in g._adjacency
            assert nid in g._reverse_adjacency
        assert g.get_edges_from("member:ghost") == [e]
        assert g.get_edges_to("bill:ghost") == [e]
        assert g.get_edges_to("member:ghost") == []
        assert g.get_edges_from("bill:ghost") == []
        assert g.node_count == 0
        assert g.edge_count == 1

    def test_clear(self, scenario_graph):
        scenario_graph.clear()
        assert scenario_graph.node_count == 0
        assert scenario_graph.edge_count == 0
        assert scenario_graph.get_edges_to("bill:B") == []

    def test_unknown_ids_are_empty_not_errors(self):
        g = GraphEngine()
        assert g.get_node("member:nobody") is None
        assert g.get_edges_from("member:nobody") == []
        assert g.get_edges_to("member:nobody") == []
        assert "member:nobody" not in g


class TestConnections:
    @pytest.mark.parametrize("d", range(0, 7))
    def test_chain_depths(self, chain, d):
        k = 4
        g = chain(k)
        found = g.get_connections("member:n0", max_depth=d)

        assert len(found) == min(d, k)
        for c in found:
            i = int(c.node.id.removeprefix("member:n"))
            assert c.depth == i
            assert len(c.edges) == i

    def test_traverses_against_edge_direction(self, chain):
        g = chain(3)
        found = g.get_connections("member:n3", max_depth=3)
        assert [c.node.id for c in found] == ["member:n2", "member:n1", "member:n0"]

    def test_filter_reports_only_type_but_walks_through_others(self):
        g = GraphEngine()
        g.add_node(_node("donor:acme", NodeType.DONOR))
        g.add_node(_node("member:A"))
        g.add_node(_node("bill:B", NodeType.BILL))
        g.add_node(_node("member:C"))
        g.add_edge(Edge("donor:acme", "member:A", EdgeType.DONATED_TO))
        g.add_edge(Edge("member:A", "bill:B", EdgeType.SPONSORS, 3))
        g.add_edge(Edge("member:C", "bill:B", EdgeType.COSPONSORS))

        found = g.get_connections("donor:acme", max_depth=3, filter_type=NodeType.MEMBER)

        assert [(c.node.id, c.depth) for c in found] == [("member:A", 1), ("member:C", 3)]
        assert [e.type for e in found[1].edges] == [
            EdgeType.DONATED_TO,
            EdgeType.SPONSORS,
            EdgeType.COSPONSORS,
        ]

    def test_node_reported_once_at_first_depth(self):
        g = GraphEngine()
        for nid in ("member:A", "member:B", "member:C"):
            g.add_node(_node(nid))
        g.add_edge(Edge("member:A", "member:B", EdgeType.COSPONSORS))
        g.add_edge(Edge("member:B", "member:C", EdgeType.COSPONSORS))
        g.add_edge(Edge("member:A", "member:C", EdgeType.COSPONSORS))

        found = g.get_connections("member:A", max_depth=3)
        assert sorted((c.node.id, c.depth) for c in found) == [("member:B", 1), ("member:C", 1)]

    def test_start_node_excluded_and_unknown_start_empty(self, scenario_graph):
        found = scenario_graph.get_connections("member:A", 5)
        assert "member:A" not in [c.node.id for c in found]
        assert scenario_graph.get_connections("member:ghost", 3) == []


class TestFindPath:
    def test_chain_length(self, chain):
        g = chain(5)
        p = g.find_path("member:n0", "member:n5", max_depth=5)
        assert p is not None
        assert p.length == 5
        assert [n.id for n in p.nodes] == [f"member:n{i}" for i in range(6)]

    def test_chain_too_deep(self, chain):
        g = chain(5)
        assert g.find_path("member:n0", "member:n5", max_depth=4) is None

    def test_reverse_direction(self, chain):
        p = chain(3).find_path("member:n3", "member:n0")
        assert p is not None and p.length == 3

    def test_self_path(self, scenario_graph):
        p = scenario_graph.find_path("bill:B", "bill:B")
        assert p.length == 0
        assert [n.id for n in p.nodes] == ["bill:B"]
        assert p.edges == []

    def test_disconnected(self):
        g = GraphEngine()
        for nid in ("member:A", "member:B", "member:X", "member:Y"):
            g.add_node(_node(nid))
        g.add_edge(Edge("member:A", "member:B", EdgeType.COSPONSORS))
        g.add_edge(Edge("member:X", "member:Y", EdgeType.COSPONSORS))

        for depth in (1, 6, 100):
            assert g.find_path("member:A", "member:Y", max_depth=depth) is None

    def test_missing_endpoint(self, scenario_graph):
        assert scenario_graph.find_path("member:A", "bill:missing") is None
        assert scenario_graph.find_path("bill:missing", "bill:missing") is None

    def test_equal_length_paths_assert_length_only(self):
        # A - B - D and A - C - D: either may come back
        g = GraphEngine()
        for nid in ("member:A", "member:B", "member:C", "member:D"):
            g.add_node(_node(nid))
        g.add_edge(Edge("member:A", "member:B", EdgeType.COSPONSORS))
        g.add_edge(Edge("member:A", "member:C", EdgeType.COSPONSORS))
        g.add_edge(Edge("member:B", "member:D", EdgeType.COSPONSORS))
        g.add_edge(Edge("member:C", "member:D", EdgeType.COSPONSORS))

        p = g.find_path("member:A", "member:D")
        assert p.length == 2
        assert p.nodes[0].id == "member:A" and p.nodes[-1].id == "member:D"


class TestInfluence:
    def test_scenario(self, scenario_graph):
        inf = scenario_graph.compute_influence("member:A")
        assert inf.factor("connections") == 1
        assert inf.factor("weighted_connections") == 3
        assert inf.factor("type_diversity") == 1
        # 1*2 + 3*0.5 + 1*10 = 13.5, rounded half up
        assert inf.score == 14
        assert inf.to_dict()["nodeId"] == "member:A"

    def test_unknown_node_is_zero(self):
        inf = GraphEngine().compute_influence("member:ghost")
        assert inf.score == 0
        assert [f.value for f in inf.factors] == [0, 0, 0]

    def test_capped_at_100(self):
        g = GraphEngine()
        g.add_node(_node("committee:X", NodeType.COMMITTEE))
        for i in range(40):
            g.add_node(_node(f"member:m{i}"))
            g.add_edge(Edge(f"member:m{i}", "committee:X", EdgeType.MEMBER_OF, 5))
        assert g.compute_influence("committee:X").score == 100

    def test_monotonic_in_added_edges(self, scenario_graph):
        g = scenario_graph
        g.add_node(_node("committee:C", NodeType.COMMITTEE))
        g.add_node(_node("donor:d", NodeType.DONOR))
        g.add_node(_node("bill:B2", NodeType.BILL))

        before = g.compute_influence("member:A").score
        for edge in (
            Edge("member:A", "committee:C", EdgeType.CHAIRS, 5),
            Edge("donor:d", "member:A", EdgeType.DONATED_TO, 1),
            Edge("member:A", "bill:B2", EdgeType.COSPONSORS, 1),
            Edge("member:A", "bill:B2", EdgeType.COSPONSORS, 1),
        ):
            g.add_edge(edge)
            after = g.compute_influence("member:A").score
            assert after >= before
            before = after


class TestStatsAndTypes:
    def test_stats_consistent(self, chain):
        g = chain(4)
        g.add_node(_node("bill:B", NodeType.BILL))
        g.add_edge(Edge("member:n0", "bill:B", EdgeType.SPONSORS, 3))
        g.add_node(_node("member:n0"))

        stats = g.get_stats()
        assert stats.nodes == 6
        assert stats.edges == sum(len(g.get_edges_from(f"member:n{i}")) for i in range(5))
        assert stats.nodes_by_type == {"member": 5, "bill": 1}
        assert stats.edges_by_type == {"cosponsors": 4, "sponsors": 1}
        assert stats.to_dict()["nodesByType"] == {"member": 5, "bill": 1}

    def test_nodes_by_type_in_insertion_order(self):
        g = GraphEngine()
        for nid in ("member:z", "bill:1", "member:a", "member:m"):
            g.add_node(_node(nid, NodeType.BILL if nid.startswith("bill") else NodeType.MEMBER))

        assert [n.id for n in g.get_nodes_by_type(NodeType.MEMBER)] == ["member:z", "member:a", "member:m"]
        assert [n.id for n in g.get_nodes_by_type("member", limit=2)] == ["member:z", "member:a"]
        assert g.get_nodes_by_type(NodeType.DONOR) == []


def test_concrete_scenario_shapes(scenario_graph):
    g = scenario_graph
    out = g.get_edges_from("member:A")
    assert len(out) == 1
    assert out[0].type == EdgeType.SPONSORS and out[0].weight == 3

    conns = g.get_connections("member:A", 1)
    assert [(c.node.id, c.depth) for c in conns] == [("bill:B", 1)]

    p = g.find_path("member:A", "bill:B")
    assert p.to_dict() == {
        "nodes": [g.get_node("member:A").to_dict(), g.get_node("bill:B").to_dict()],
        "edges": [{"source": "member:A", "target": "bill:B", "type": "sponsors", "weight": 3}],
        "length": 1,
    }
