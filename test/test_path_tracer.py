"""
This module contains some tests for asmgraph. To run them, execute `pytest` from the root
asmgraph directory.

Copyright 2024 Ryan Wick (rrwick@gmail.com)

This file is part of asmgraph. asmgraph is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. asmgraph is distributed
in the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with asmgraph.
If not, see <https://www.gnu.org/licenses/>.
"""

import asmgraph.assembly_graph
import asmgraph.misc
import asmgraph.path_tracer


def build_graph(names, links):
    g = asmgraph.assembly_graph.AssemblyGraph()
    for name in names:
        g.add_node_pair(name, length=100)
    for a, b in links:
        g.add_edge(g.get_node(a), g.get_node(b))
    return g


def names(g, path):
    return [g.node_name(n) for n in path]


def test_trace_paths_single_step():
    g = build_graph(['1', '2', '3'], [('1+', '2+'), ('2+', '3+')])
    edge = g.get_edge(g.get_node('1+'), g.get_node('2+'))
    paths = asmgraph.path_tracer.trace_paths(g, edge, True, 1)
    assert [names(g, p) for p in paths] == [['2+']]


def test_trace_paths_backward():
    g = build_graph(['1', '2', '3'], [('1+', '2+'), ('2+', '3+')])
    edge = g.get_edge(g.get_node('2+'), g.get_node('3+'))
    paths = asmgraph.path_tracer.trace_paths(g, edge, False, 5)
    assert [names(g, p) for p in paths] == [['2+', '1+']]


def test_trace_paths_branching():
    g = build_graph(['1', '2', '3', '4', '5'],
                    [('1+', '2+'), ('2+', '3+'), ('2+', '4+'), ('4+', '5+')])
    edge = g.get_edge(g.get_node('1+'), g.get_node('2+'))
    paths = asmgraph.path_tracer.trace_paths(g, edge, True, 10)
    assert [names(g, p) for p in paths] == [['2+', '3+'], ['2+', '4+', '5+']]
    paths = asmgraph.path_tracer.trace_paths(g, edge, True, 2)
    assert [names(g, p) for p in paths] == [['2+', '3+'], ['2+', '4+']]


def test_trace_paths_loop_back_to_origin():
    # A -> B -> C -> A: the path ends when it gets back to A.
    g = build_graph(['A', 'B', 'C'], [('A+', 'B+'), ('B+', 'C+'), ('C+', 'A+')])
    edge = g.get_edge(g.get_node('A+'), g.get_node('B+'))
    paths = asmgraph.path_tracer.trace_paths(g, edge, True, 10)
    assert [names(g, p) for p in paths] == [['B+', 'C+']]


def test_trace_paths_cycle():
    g = build_graph(['A', 'B', 'C'], [('A+', 'B+'), ('B+', 'C+'), ('C+', 'A+')])
    for edge in g.edges:
        for forward in [True, False]:
            paths = asmgraph.path_tracer.trace_paths(g, edge, forward, 10)
            for path in paths:
                assert len(path) <= 2 * 3


def test_trace_paths_loop_cutoff_1():
    # X -> A -> B -> C -> A: the cycle doesn't pass through the origin, so the branch which would
    # visit A a third time is thrown out.
    g = build_graph(['X', 'A', 'B', 'C'], [('X+', 'A+'), ('A+', 'B+'), ('B+', 'C+'), ('C+', 'A+')])
    edge = g.get_edge(g.get_node('X+'), g.get_node('A+'))
    assert asmgraph.path_tracer.trace_paths(g, edge, True, 10) == []


def test_trace_paths_loop_cutoff_2():
    # Same as above, but with a way out of the cycle: C -> D.
    g = build_graph(['X', 'A', 'B', 'C', 'D'],
                    [('X+', 'A+'), ('A+', 'B+'), ('B+', 'C+'), ('C+', 'A+'), ('C+', 'D+')])
    edge = g.get_edge(g.get_node('X+'), g.get_node('A+'))
    paths = asmgraph.path_tracer.trace_paths(g, edge, True, 10)
    assert [names(g, p) for p in paths] == [['A+', 'B+', 'C+', 'A+', 'B+', 'C+', 'D+'],
                                            ['A+', 'B+', 'C+', 'D+']]
    for path in paths:
        for n in path:
            assert path.count(n) <= 2


def test_trace_paths_self_loop():
    g = build_graph(['1', '2', '3'], [('1+', '2+'), ('2+', '2+'), ('2+', '3+')])
    edge = g.get_edge(g.get_node('1+'), g.get_node('2+'))
    paths = asmgraph.path_tracer.trace_paths(g, edge, True, 10)
    assert [names(g, p) for p in paths] == [['2+', '2+', '3+'], ['2+', '3+']]


def test_trace_paths_cancelled():
    g = build_graph(['1', '2', '3'], [('1+', '2+'), ('2+', '3+')])
    edge = g.get_edge(g.get_node('1+'), g.get_node('2+'))
    token = asmgraph.misc.CancelToken()
    assert asmgraph.path_tracer.trace_paths(g, edge, True, 10, token) is not None
    token.cancel()
    assert asmgraph.path_tracer.trace_paths(g, edge, True, 10, token) is None


def test_trace_paths_cancelled_by_callback():
    g = build_graph(['A', 'B', 'C'], [('A+', 'B+'), ('B+', 'C+'), ('C+', 'A+')])
    edge = g.get_edge(g.get_node('A+'), g.get_node('B+'))
    token = asmgraph.misc.CancelToken(lambda t: t.cancel(), interval=2)
    assert asmgraph.path_tracer.trace_paths(g, edge, True, 10, token) is None


def test_leads_only_to_node_1():
    g = build_graph(['1', '2', '3', '4'], [('1+', '2+'), ('1+', '3+'), ('2+', '4+'), ('3+', '4+')])
    n1, n2, n3, n4 = (g.get_node(n) for n in ['1+', '2+', '3+', '4+'])
    edge_1_2, edge_1_3 = g.get_edge(n1, n2), g.get_edge(n1, n3)
    assert asmgraph.path_tracer.leads_only_to_node(g, edge_1_2, True, n4, 10)
    assert asmgraph.path_tracer.leads_only_to_node(g, edge_1_3, True, n4, 10)
    assert asmgraph.path_tracer.leads_only_to_node(g, edge_1_2, True, n2, 10)
    assert not asmgraph.path_tracer.leads_only_to_node(g, edge_1_3, True, n2, 10)


def test_leads_only_to_node_2():
    # Running out of steps before reaching the target.
    g = build_graph(['1', '2', '3', '4'], [('1+', '2+'), ('2+', '3+'), ('3+', '4+')])
    edge = g.get_edge(g.get_node('1+'), g.get_node('2+'))
    n4 = g.get_node('4+')
    assert asmgraph.path_tracer.leads_only_to_node(g, edge, True, n4, 3)
    assert not asmgraph.path_tracer.leads_only_to_node(g, edge, True, n4, 2)


def test_leads_only_to_node_3():
    # A dead end which doesn't pass through the target.
    g = build_graph(['1', '2', '3', '4'], [('1+', '2+'), ('2+', '3+'), ('2+', '4+')])
    edge = g.get_edge(g.get_node('1+'), g.get_node('2+'))
    assert not asmgraph.path_tracer.leads_only_to_node(g, edge, True, g.get_node('4+'), 10)


def test_leads_only_to_node_4():
    # A -> B -> C -> A, with a branch B -> T: the cycle comes back to A without reaching T.
    g = build_graph(['A', 'B', 'C', 'T'], [('A+', 'B+'), ('B+', 'C+'), ('C+', 'A+'), ('B+', 'T+')])
    edge = g.get_edge(g.get_node('A+'), g.get_node('B+'))
    assert not asmgraph.path_tracer.leads_only_to_node(g, edge, True, g.get_node('T+'), 10)


def test_leads_only_to_node_5():
    # Backward from 4+ only reaches 1-'s reverse complement.
    g = build_graph(['1', '2', '4'], [('1-', '2+'), ('2+', '4+')])
    edge = g.get_edge(g.get_node('2+'), g.get_node('4+'))
    n1 = g.get_node('1+')
    assert not asmgraph.path_tracer.leads_only_to_node(g, edge, False, n1, 10)
    assert asmgraph.path_tracer.leads_only_to_node(g, edge, False, n1, 10, True)


def test_leads_only_to_node_cancelled():
    g = build_graph(['1', '2'], [('1+', '2+')])
    edge = g.get_edge(g.get_node('1+'), g.get_node('2+'))
    token = asmgraph.misc.CancelToken()
    token.cancel()
    assert asmgraph.path_tracer.leads_only_to_node(g, edge, True, g.get_node('2+'), 10,
                                                   cancel_token=token) is None


def test_node_leads_only_to_node():
    g = build_graph(['1', '2', '3'], [('1+', '2+'), ('2+', '3+')])
    n1, n2, n3 = g.get_node('1+'), g.get_node('2+'), g.get_node('3+')
    assert asmgraph.path_tracer.node_leads_only_to_node(g, n1, n3, 10)
    assert asmgraph.path_tracer.node_leads_only_to_node(g, n3, n1, 10)
    g = build_graph(['1', '2'], [('1+', '2+')])
    n1, n2 = g.get_node('1+'), g.get_node('2+')
    assert not asmgraph.path_tracer.node_leads_only_to_node(g, n1, g.get_node('2-'), 10)
    assert asmgraph.path_tracer.node_leads_only_to_node(g, n1, g.get_node('2-'), 10, True)


def test_nodes_common_to_all_paths():
    g = build_graph(['1', '2', '3', '4'], [])
    n1, n2, n3, n4 = (g.get_node(n) for n in ['1+', '2+', '3+', '4+'])
    paths = [[n1, n2, n3], [n3, n2, n4], [n2, n3]]
    assert asmgraph.path_tracer.nodes_common_to_all_paths(g, paths) == [n2, n3]
    assert asmgraph.path_tracer.nodes_common_to_all_paths(g, []) == []

    rc = g.reverse_complement_node
    paths = [[n1, n2], [rc(n2), n3]]
    assert asmgraph.path_tracer.nodes_common_to_all_paths(g, paths) == []
    assert asmgraph.path_tracer.nodes_common_to_all_paths(g, paths, True) == [n2, rc(n2)]
