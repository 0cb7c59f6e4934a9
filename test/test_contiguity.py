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
import asmgraph.contiguity
import asmgraph.misc
from asmgraph.contiguity import STARTING, CONTIGUOUS_STRAND_SPECIFIC, \
    CONTIGUOUS_EITHER_STRAND, MAYBE_CONTIGUOUS


def build_graph(names, links):
    g = asmgraph.assembly_graph.AssemblyGraph()
    for name in names:
        g.add_node_pair(name, length=100)
    for a, b in links:
        g.add_edge(g.get_node(a), g.get_node(b))
    return g


def named_statuses(g, statuses):
    return {g.node_name(n): s for n, s in statuses.items()}


def test_linear():
    g = build_graph(['1', '2', '3'], [('1+', '2+'), ('2+', '3+')])
    statuses = asmgraph.contiguity.determine_contiguity(g, g.get_node('1+'), 15)
    assert named_statuses(g, statuses) == {'1+': STARTING,
                                           '2+': CONTIGUOUS_STRAND_SPECIFIC,
                                           '3+': CONTIGUOUS_STRAND_SPECIFIC,
                                           '2-': CONTIGUOUS_EITHER_STRAND,
                                           '3-': CONTIGUOUS_EITHER_STRAND}


def test_branch_leading_back():
    # 1+ -> 2+, which splits into 3+ and 4+. Both of those only lead back to 1+.
    g = build_graph(['1', '2', '3', '4'], [('1+', '2+'), ('2+', '3+'), ('2+', '4+')])
    statuses = asmgraph.contiguity.determine_contiguity(g, g.get_node('1+'), 15)
    assert named_statuses(g, statuses) == {'1+': STARTING,
                                           '2+': CONTIGUOUS_STRAND_SPECIFIC,
                                           '2-': CONTIGUOUS_EITHER_STRAND,
                                           '3+': CONTIGUOUS_STRAND_SPECIFIC,
                                           '4+': CONTIGUOUS_STRAND_SPECIFIC}


def test_maybe_contiguous():
    # Same as above, but 5+ also leads into 2+, so 3+ and 4+ might come from 5+ instead.
    g = build_graph(['1', '2', '3', '4', '5'],
                    [('1+', '2+'), ('5+', '2+'), ('2+', '3+'), ('2+', '4+')])
    statuses = asmgraph.contiguity.determine_contiguity(g, g.get_node('1+'), 15)
    assert named_statuses(g, statuses) == {'1+': STARTING,
                                           '2+': CONTIGUOUS_STRAND_SPECIFIC,
                                           '2-': CONTIGUOUS_EITHER_STRAND,
                                           '3+': MAYBE_CONTIGUOUS,
                                           '4+': MAYBE_CONTIGUOUS}
    assert g.get_node('5+') not in statuses


def test_isolated_node():
    g = build_graph(['1', '2'], [])
    statuses = asmgraph.contiguity.determine_contiguity(g, g.get_node('1+'), 15)
    assert named_statuses(g, statuses) == {'1+': STARTING}


def test_cycle():
    g = build_graph(['A', 'B', 'C'], [('A+', 'B+'), ('B+', 'C+'), ('C+', 'A+')])
    statuses = asmgraph.contiguity.determine_contiguity(g, g.get_node('A+'), 15)
    assert statuses[g.get_node('A+')] == STARTING
    assert statuses[g.get_node('B+')] == CONTIGUOUS_STRAND_SPECIFIC
    assert statuses[g.get_node('C+')] == CONTIGUOUS_STRAND_SPECIFIC


def test_cancelled():
    g = build_graph(['1', '2', '3'], [('1+', '2+'), ('2+', '3+')])
    token = asmgraph.misc.CancelToken()
    token.cancel()
    assert asmgraph.contiguity.determine_contiguity(g, g.get_node('1+'), 15, token) is None
