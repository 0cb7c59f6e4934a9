"""
Copyright 2024 Ryan Wick (rrwick@gmail.com)

This program is free software: you can redistribute it and/or modify it under the terms of the GNU
General Public License as published by the Free Software Foundation, either version 3 of the
License, or (at your option) any later version.

This program is distributed in the hope that it will be useful, but WITHOUT ANY WARRANTY; without
even the implied warranty of MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
General Public License for more details.

You should have received a copy of the GNU General Public License along with this program. If not,
see <https://www.gnu.org/licenses/>.
"""

import functools
from typing import Dict, List, Optional, Tuple

from .edge import Edge, EXACT_OVERLAP
from .misc import reverse_complement
from .node import Node


class AssemblyGraph(object):
    """
    The AssemblyGraph owns all Node and Edge objects. Nodes are stored in a list and edges in a
    dictionary, and everything refers to everything else by these integer handles:
    * node.number is the node's index in self.nodes
    * edge.number is the edge's key in self.edges
    * node.edges, node.reverse_complement, edge.start, edge.end and edge.reverse_complement all
      hold handles.

    Graph construction (file loading etc.) happens elsewhere - this class just provides the
    building blocks: node pairs and edges which automatically get their reverse complements.
    Mutating methods must not be called while anything else is using the graph.
    """
    def __init__(self):
        self.nodes: List[Node] = []
        self.edges: Dict[int, Edge] = {}
        self.node_names: Dict[str, int] = {}
        self.edge_index: Dict[Tuple[int, int], int] = {}
        self.next_edge_number = 0

    def __repr__(self):
        return f'assembly graph: {len(self.nodes)} nodes, {len(self.edges)} edges'

    def add_node_pair(self, name, depth=0.0, seq='', length=None):
        """
        Adds a positive node ('name+') and its negative twin ('name-') and returns their handles.
        """
        pos_name, neg_name = name + '+', name + '-'
        assert pos_name not in self.node_names and neg_name not in self.node_names
        pos_number, neg_number = len(self.nodes), len(self.nodes) + 1
        pos_node = Node(pos_number, pos_name, depth, seq, length)
        neg_node = Node(neg_number, neg_name, depth, reverse_complement(seq), length)
        pos_node.reverse_complement = neg_number
        neg_node.reverse_complement = pos_number
        self.nodes.append(pos_node)
        self.nodes.append(neg_node)
        self.node_names[pos_name] = pos_number
        self.node_names[neg_name] = neg_number
        return pos_number, neg_number

    def get_node(self, name) -> Optional[int]:
        return self.node_names.get(name)

    def node_name(self, node):
        return self.nodes[node].name

    def node_length(self, node):
        return self.nodes[node].length

    def reverse_complement_node(self, node):
        return self.nodes[node].reverse_complement

    def reverse_complement_edge(self, edge):
        return self.edges[edge].reverse_complement

    def add_edge(self, start, end, overlap=0, overlap_type=EXACT_OVERLAP):
        """
        Adds an edge along with its reverse complement edge, returning the handle of the requested
        edge. If the edge already exists, nothing is added and the existing handle is returned.
        """
        existing = self.get_edge(start, end)
        if existing is not None:
            return existing
        forward_edge = self.create_edge(start, end, overlap, overlap_type)
        rc_start = self.reverse_complement_node(end)
        rc_end = self.reverse_complement_node(start)
        if (rc_start, rc_end) == (start, end):  # e.g. 1+ -> 1-
            forward_edge.reverse_complement = forward_edge.number
        else:
            reverse_edge = self.create_edge(rc_start, rc_end, overlap, overlap_type)
            forward_edge.reverse_complement = reverse_edge.number
            reverse_edge.reverse_complement = forward_edge.number
        return forward_edge.number

    def create_edge(self, start, end, overlap, overlap_type):
        edge = Edge(self.next_edge_number, start, end, overlap, overlap_type)
        self.next_edge_number += 1
        self.edges[edge.number] = edge
        self.edge_index[(start, end)] = edge.number
        self.nodes[start].add_edge(edge.number)
        self.nodes[end].add_edge(edge.number)
        return edge

    def remove_edge(self, edge):
        """
        Removes an edge and its reverse complement, detaching both from their nodes.
        """
        rc_edge = self.edges[edge].reverse_complement
        for e in {edge, rc_edge}:
            e_obj = self.edges.pop(e)
            del self.edge_index[(e_obj.start, e_obj.end)]
            self.nodes[e_obj.start].remove_edge(e)
            self.nodes[e_obj.end].remove_edge(e)

    def get_edge(self, start, end) -> Optional[int]:
        return self.edge_index.get((start, end))

    def other_endpoint(self, edge, node):
        return self.edges[edge].other_node(node)

    def incident_edges(self, node):
        return list(self.nodes[node].edges)

    def leaving_edges(self, node):
        return [e for e in self.nodes[node].edges if self.edges[e].start == node]

    def entering_edges(self, node):
        return [e for e in self.nodes[node].edges if self.edges[e].end == node]

    def next_edges(self, node, forward):
        """
        Edges which continue a traversal from the given node: leaving edges when going forward,
        entering edges when going backward.
        """
        return self.leaving_edges(node) if forward else self.entering_edges(node)

    def downstream_nodes(self, node):
        return [self.edges[e].end for e in self.leaving_edges(node)]

    def upstream_nodes(self, node):
        return [self.edges[e].start for e in self.entering_edges(node)]

    def is_node_connected(self, node, other):
        return any(self.edges[e].other_node(node) == other for e in self.nodes[node].edges)

    def does_node_lead_in(self, node, other):
        """
        Returns the edge from other to node, or None if there isn't one.
        """
        return self.get_edge(other, node)

    def does_node_lead_away(self, node, other):
        """
        Returns the edge from node to other, or None if there isn't one.
        """
        return self.get_edge(node, other)

    def self_looping_edge(self, node):
        return self.get_edge(node, node)

    def dead_end_count(self, node):
        """
        Returns 0, 1 or 2: one for each end of the node which has no connections.
        """
        count = 0
        if not self.entering_edges(node):
            count += 1
        if not self.leaving_edges(node):
            count += 1
        return count

    def length_without_trailing_overlap(self, node):
        length = self.nodes[node].length
        leaving_overlaps = [self.edges[e].overlap for e in self.leaving_edges(node)]
        if not leaving_overlaps:
            return length
        return max(length - max(leaving_overlaps), 0)

    def is_positive_edge(self, edge):
        """
        Half of the graph's edges are positive and their reverse complements are negative, which
        lets callers pick one edge from each pair.
        """
        e = self.edges[edge]
        start, end = self.nodes[e.start], self.nodes[e.end]
        if start.is_positive() and end.is_positive():
            return True
        if start.is_negative() and end.is_negative():
            return False
        if e.is_own_reverse_complement():
            return True

        # One node is positive and the other negative. The choice here is arbitrary, but it is
        # consistent: compare the starting node names of this edge and its reverse complement.
        rc_start = self.nodes[self.edges[e.reverse_complement].start]
        return start.name > rc_start.name

    def positive_edges(self):
        return [e for e in self.edges if self.is_positive_edge(e)]

    def edge_less_than(self, a, b):
        """
        Edges sort by their node names: numerically if all names are numbers (ignoring the sign),
        otherwise as strings.
        """
        a_start = self.nodes[self.edges[a].start].name
        b_start = self.nodes[self.edges[b].start].name
        a_end = self.nodes[self.edges[a].end].name
        b_end = self.nodes[self.edges[b].end].name
        numbers = [name_as_number(n) for n in (a_start, b_start, a_end, b_end)]
        if all(n is not None for n in numbers):
            a_start_num, b_start_num, a_end_num, b_end_num = numbers
            if a_start_num != b_start_num:
                return a_start_num < b_start_num
            return a_end_num < b_end_num
        return a_start < b_start

    def sorted_edges(self, edges=None):
        if edges is None:
            edges = list(self.edges)

        def compare(a, b):
            if self.edge_less_than(a, b):
                return -1
            if self.edge_less_than(b, a):
                return 1
            return 0
        return sorted(edges, key=functools.cmp_to_key(compare))

    def check_invariants(self):
        """
        Asserts the graph's structural rules: nodes and edges pair up with their reverse
        complements, and each node's edge list matches the edges which touch it.
        """
        for node in self.nodes:
            rc = self.nodes[node.reverse_complement]
            assert rc.reverse_complement == node.number
            assert self.node_names[node.name] == node.number
            for e in node.edges:
                assert node.number in (self.edges[e].start, self.edges[e].end)
        for edge in self.edges.values():
            assert edge.number in self.nodes[edge.start].edges
            assert edge.number in self.nodes[edge.end].edges
            assert self.edge_index[(edge.start, edge.end)] == edge.number
            rc_edge = self.edges[edge.reverse_complement]
            assert rc_edge.reverse_complement == edge.number
            assert rc_edge.start == self.reverse_complement_node(edge.end)
            assert rc_edge.end == self.reverse_complement_node(edge.start)
            assert rc_edge.overlap == edge.overlap


def name_as_number(name):
    try:
        return int(name[:-1])
    except ValueError:
        return None
