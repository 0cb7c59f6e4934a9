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

from typing import List, Optional


class Node(object):
    """
    Node objects hold one strand of a contig: its sign-suffixed name (e.g. '5+' or '5-'), its depth
    and its sequence. Nodes are always created in pairs by the AssemblyGraph, and they refer to
    their edges and their reverse complement by handle (index into the graph), not by reference.

    A node can have a length but no sequence (e.g. when a graph file stores '*' for a segment's
    sequence). Such a node still works for anything based on lengths, but not for anything which
    needs actual bases.
    """
    def __init__(self, number: int, name: str, depth: float = 0.0, seq: str = '',
                 length: Optional[int] = None):
        self.number = number
        self.name = name
        self.depth = depth
        self.seq = seq
        self.length = len(seq) if length is None else length
        assert not seq or self.length == len(seq)

        # Handles of the edges touching this node (no duplicates, even for a self-loop):
        self.edges: List[int] = []

        # Handle of the node for the opposite strand:
        self.reverse_complement: Optional[int] = None

    def __repr__(self):
        if len(self.seq) < 15:
            seq = self.seq
        else:
            seq = self.seq[:6] + '...' + self.seq[-6:]
        return f'node {self.name}: {seq}, {self.length} bp, {self.depth:.2f}x'

    def sign(self):
        if self.name:
            return self.name[-1]
        return '+'

    def name_without_sign(self):
        return self.name[:-1]

    def is_positive(self):
        return self.sign() == '+'

    def is_negative(self):
        return self.sign() == '-'

    def sequence_is_missing(self):
        return len(self.seq) == 0 and self.length > 0

    def get_base_at(self, i):
        """
        Returns the base at the 0-based index i, or an empty string if i is outside of the stored
        sequence.
        """
        if 0 <= i < len(self.seq):
            return self.seq[i]
        return ''

    def set_sequence(self, seq):
        self.seq = seq
        self.length = len(seq)

    def add_edge(self, edge):
        if edge not in self.edges:
            self.edges.append(edge)

    def remove_edge(self, edge):
        if edge in self.edges:
            self.edges.remove(edge)
