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

from .misc import is_cancelled, wrap_sequence


ENTIRE_NODE = 0
PART_OF_NODE = 1


class Path(object):
    """
    A Path is an ordered list of node handles, along with the edge handles which connect them.
    A linear path has one fewer edge than nodes. A circular path has an extra edge at the end,
    going from its last node back to its first node.

    The start and end of a path can be part way through a node. The positions are 1-based and
    inclusive, so a start position of 1 includes the entire first node and an end position equal
    to the last node's length includes the entire last node.
    """
    def __init__(self, graph):
        self.graph = graph
        self.nodes = []
        self.edges = []
        self.start_type = ENTIRE_NODE
        self.start_position = 1
        self.end_type = ENTIRE_NODE
        self.end_position = None

    def __repr__(self):
        return f'path: {self.get_string()}'

    @classmethod
    def from_ordered_nodes(cls, graph, nodes, circular=False):
        """
        Builds a path which visits the nodes in the given order. If any pair of consecutive nodes
        (or the last and first nodes, for a circular path) isn't joined by an edge, an empty path
        is returned.
        """
        path = cls(graph)
        for node in nodes:
            if not path.try_append(node, strand_specific=True):
                return cls(graph)
        if circular and path.nodes:
            wrap_edge = graph.get_edge(path.nodes[-1], path.nodes[0])
            if wrap_edge is None:
                return cls(graph)
            path.edges.append(wrap_edge)
        return path

    @classmethod
    def from_unordered_nodes(cls, graph, nodes, strand_specific=True):
        """
        Builds a path using all of the given nodes, working out their order from the graph. This
        only succeeds if the nodes form a single unambiguous chain or cycle - otherwise an empty
        path is returned.

        If strand_specific is False, a node's reverse complement can be used in its place.
        """
        path = cls(graph)
        remaining = list(nodes)
        if not remaining:
            return path
        path.try_append(remaining.pop(0), strand_specific)

        while remaining:
            for i, node in enumerate(remaining):
                if path.try_append(node, strand_specific) or \
                        path.try_prepend(node, strand_specific):
                    del remaining[i]
                    break
            else:
                return cls(graph)  # a node couldn't be placed

        wrap_edge = graph.get_edge(path.nodes[-1], path.nodes[0])
        if wrap_edge is not None:
            path.edges.append(wrap_edge)

        # If the nodes have other connections between them, then there's more than one way to
        # string them together and the path is ambiguous.
        if path.check_for_other_edges():
            return cls(graph)
        return path

    def copy(self):
        new_path = Path(self.graph)
        new_path.nodes = list(self.nodes)
        new_path.edges = list(self.edges)
        new_path.start_type, new_path.start_position = self.start_type, self.start_position
        new_path.end_type, new_path.end_position = self.end_type, self.end_position
        return new_path

    def is_empty(self):
        return len(self.nodes) == 0

    def is_circular(self):
        if not self.nodes or len(self.edges) != len(self.nodes):
            return False
        wrap_edge = self.graph.edges[self.edges[-1]]
        return wrap_edge.start == self.nodes[-1] and wrap_edge.end == self.nodes[0]

    def try_append(self, node, strand_specific=True):
        """
        Adds the node to the end of the path if an edge leads to it from the current last node,
        returning whether it was added. If strand_specific is False, the node's reverse complement
        is tried too.
        """
        if not self.nodes:
            self.nodes.append(node)
            return True
        if self.is_circular():
            return False
        for candidate in self.strand_candidates(node, strand_specific):
            edge = self.graph.get_edge(self.nodes[-1], candidate)
            if edge is not None:
                self.nodes.append(candidate)
                self.edges.append(edge)
                self.end_type, self.end_position = ENTIRE_NODE, None
                return True
        return False

    def try_prepend(self, node, strand_specific=True):
        if not self.nodes:
            self.nodes.append(node)
            return True
        if self.is_circular():
            return False
        for candidate in self.strand_candidates(node, strand_specific):
            edge = self.graph.get_edge(candidate, self.nodes[0])
            if edge is not None:
                self.nodes.insert(0, candidate)
                self.edges.insert(0, edge)
                self.start_type, self.start_position = ENTIRE_NODE, 1
                return True
        return False

    def strand_candidates(self, node, strand_specific):
        if strand_specific:
            return [node]
        return [node, self.graph.reverse_complement_node(node)]

    def can_node_fit_on_end(self, node):
        if not self.nodes:
            return True
        return self.graph.get_edge(self.nodes[-1], node) is not None

    def can_node_fit_at_start(self, node):
        if not self.nodes:
            return True
        return self.graph.get_edge(node, self.nodes[0]) is not None

    def set_start(self, position):
        assert self.nodes and 1 <= position
        self.start_type, self.start_position = PART_OF_NODE, position

    def set_end(self, position):
        assert self.nodes and 1 <= position
        self.end_type, self.end_position = PART_OF_NODE, position

    def get_end_position(self):
        if self.end_type == PART_OF_NODE:
            return self.end_position
        return self.graph.node_length(self.nodes[-1])

    def check_for_other_edges(self):
        """
        Returns True if any edge joins two of this path's nodes without being part of the path.
        """
        path_nodes, path_edges = set(self.nodes), set(self.edges)
        for node in path_nodes:
            for edge in self.graph.nodes[node].edges:
                e = self.graph.edges[edge]
                if e.start in path_nodes and e.end in path_nodes and edge not in path_edges:
                    return True
        return False

    def get_length(self):
        """
        The path's length in bases, worked out from node lengths so it also works for nodes with
        missing sequences. It is always the same as len(self.get_sequence()) when sequences exist.
        """
        if not self.nodes:
            return 0
        length = sum(self.graph.node_length(n) for n in self.nodes)
        length -= sum(self.graph.edges[e].overlap for e in self.edges)
        if self.start_type == PART_OF_NODE:
            length -= self.start_position - 1
        if self.end_type == PART_OF_NODE:
            length -= self.graph.node_length(self.nodes[-1]) - self.end_position
        return length

    def get_sequence(self):
        if not self.nodes:
            return ''
        circular = self.is_circular()
        last_i = len(self.nodes) - 1
        sequence = []
        for i, node in enumerate(self.nodes):
            seq = self.graph.nodes[node].seq
            if i > 0:
                seq_start = self.graph.edges[self.edges[i - 1]].overlap
            elif circular:
                seq_start = self.graph.edges[self.edges[-1]].overlap
            else:
                seq_start = 0
            if i == 0 and self.start_type == PART_OF_NODE:
                seq_start += self.start_position - 1
            seq_end = len(seq)
            if i == last_i and self.end_type == PART_OF_NODE:
                seq_end = self.end_position
            sequence.append(seq[seq_start:seq_end])
        return ''.join(sequence)

    def get_string(self, spaces=True):
        """
        Returns the path in a form like '(81) 1+, 2+ (30)', where the numbers in parentheses are
        only included for a path which starts/ends part way through a node.
        """
        if not self.nodes:
            return ''
        space = ' ' if spaces else ''
        path_str = (',' + space).join(self.graph.node_name(n) for n in self.nodes)
        if self.start_type == PART_OF_NODE:
            path_str = f'({self.start_position}){space}{path_str}'
        if self.end_type == PART_OF_NODE:
            path_str = f'{path_str}{space}({self.end_position})'
        return path_str

    def get_fasta(self, name=None):
        if name is None:
            name = self.get_string(spaces=False)
        return f'>{name}\n' + wrap_sequence(self.get_sequence())

    def contains_sub_path(self, other):
        """
        Returns whether the other path's nodes appear as a consecutive run in this path.
        """
        n = len(other.nodes)
        return any(self.nodes[i:i+n] == other.nodes for i in range(len(self.nodes) - n + 1))

    def same_as(self, other):
        return self.nodes == other.nodes and self.edges == other.edges and \
            self.start_type == other.start_type and self.start_position == other.start_position \
            and self.end_type == other.end_type and self.end_position == other.end_position


def get_all_possible_paths(graph, start_node, start_position, end_node, end_position,
                           node_search_depth, min_distance, max_distance, cancel_token=None):
    """
    Finds all paths which go from a position in the start node to a position in the end node,
    following leaving edges through at most node_search_depth additional nodes, and which have a
    length in the given range. Returns None if cancelled.
    """
    start_path = Path(graph)
    start_path.try_append(start_node)
    start_path.set_start(start_position)

    finished_paths, unfinished_paths = [], [start_path]
    for i in range(node_search_depth + 1):
        if is_cancelled(cancel_token):
            return None

        # Paths which have reached the end node are finished if they have an acceptable length,
        # but they stay in the unfinished list too, since they may come back around to the end
        # node again. Paths which are already too long are dropped.
        still_unfinished = []
        for path in unfinished_paths:
            if path.nodes[-1] == end_node:
                finished_path = path.copy()
                finished_path.set_end(end_position)
                if min_distance <= finished_path.get_length() <= max_distance:
                    finished_paths.append(finished_path)
                still_unfinished.append(path)
            elif path.get_length() <= max_distance:
                still_unfinished.append(path)
        unfinished_paths = still_unfinished

        if i == node_search_depth:
            break

        extended_paths = []
        for path in unfinished_paths:
            if is_cancelled(cancel_token):
                return None
            for edge in graph.leaving_edges(path.nodes[-1]):
                new_path = path.copy()
                new_path.try_append(graph.edges[edge].end)
                extended_paths.append(new_path)
        unfinished_paths = extended_paths

    return finished_paths
