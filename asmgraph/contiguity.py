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

from .path_tracer import trace_paths, nodes_common_to_all_paths, node_leads_only_to_node


# Lower values are more certain. A node's status only ever moves to a lower value.
STARTING = 0
CONTIGUOUS_STRAND_SPECIFIC = 1
CONTIGUOUS_EITHER_STRAND = 2
MAYBE_CONTIGUOUS = 3
NOT_CONTIGUOUS = 4


def determine_contiguity(graph, node, steps, cancel_token=None):
    """
    Works out which nodes must be contiguous with the given node (i.e. on the same piece of DNA),
    by tracing paths out from each of its edges. Returns a dictionary of node handle to status,
    where nodes not in the dictionary are NOT_CONTIGUOUS, or None if cancelled.
    """
    statuses = {node: STARTING}

    def upgrade(n, status):
        statuses[n] = min(statuses.get(n, NOT_CONTIGUOUS), status)

    # Nodes in the traced paths are kept in a separate list, because nodes which end up
    # MAYBE_CONTIGUOUS still need the second check below.
    checked_nodes = {}
    for edge in graph.incident_edges(node):
        forward = graph.edges[edge].start == node
        all_paths = trace_paths(graph, edge, forward, steps, cancel_token)
        if all_paths is None:
            return None
        for path in all_paths:
            for n in path:
                upgrade(n, MAYBE_CONTIGUOUS)
                checked_nodes[n] = True
        for n in nodes_common_to_all_paths(graph, all_paths, False):
            upgrade(n, CONTIGUOUS_STRAND_SPECIFIC)
        for n in nodes_common_to_all_paths(graph, all_paths, True):
            upgrade(n, CONTIGUOUS_EITHER_STRAND)
            upgrade(graph.reverse_complement_node(n), CONTIGUOUS_EITHER_STRAND)

    # A node which isn't common to all paths from the starting node can still be contiguous with
    # it if all of its own paths lead to the starting node.
    for n in checked_nodes:
        if statuses[n] <= CONTIGUOUS_STRAND_SPECIFIC:
            continue
        strand_specific = node_leads_only_to_node(graph, n, node, steps, False, cancel_token)
        if strand_specific is None:
            return None
        if strand_specific:
            upgrade(n, CONTIGUOUS_STRAND_SPECIFIC)
            continue
        either_strand = node_leads_only_to_node(graph, n, node, steps, True, cancel_token)
        if either_strand is None:
            return None
        if either_strand:
            upgrade(n, CONTIGUOUS_EITHER_STRAND)
            upgrade(graph.reverse_complement_node(n), CONTIGUOUS_EITHER_STRAND)
    return statuses
