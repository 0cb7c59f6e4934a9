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

from typing import Optional


UNKNOWN_OVERLAP = 0
EXACT_OVERLAP = 1  # given by the user or the graph file
AUTO_DETERMINED_EXACT_OVERLAP = 2


class Edge(object):
    """
    An Edge goes from a starting node to an ending node, both stored as handles. The overlap is
    the number of bases shared by the end of the starting node and the start of the ending node.
    Every edge has a reverse complement edge (possibly itself) which the AssemblyGraph keeps in
    sync.
    """
    def __init__(self, number: int, start: int, end: int, overlap: int = 0,
                 overlap_type: int = UNKNOWN_OVERLAP):
        assert overlap >= 0
        self.number = number
        self.start = start
        self.end = end
        self.overlap = overlap
        self.overlap_type = overlap_type
        self.reverse_complement: Optional[int] = None

    def __repr__(self):
        return f'edge {self.number}: {self.start} -> {self.end}, {self.overlap} bp overlap'

    def other_node(self, node):
        """
        Takes one of this edge's nodes and returns the other one.
        """
        assert node == self.start or node == self.end
        return self.end if node == self.start else self.start

    def next_node(self, forward):
        """
        The node this edge leads to when followed forward (start -> end) or backward.
        """
        return self.end if forward else self.start

    def leads_away_from(self, node, forward):
        if forward:
            return self.start == node
        return self.end == node

    def is_own_reverse_complement(self):
        return self.reverse_complement == self.number

    def set_overlap(self, overlap, overlap_type):
        assert overlap >= 0
        self.overlap = overlap
        self.overlap_type = overlap_type
