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

This module traces paths outward from an edge. Both of its searches walk the graph depth-first
using an explicit stack instead of recursion. They share a single path list: each stack entry
remembers how long the path was when the entry was made, and the path is cut back to that length
when the entry is popped. So backtracking never copies the path.

Both searches use the same rule to avoid getting stuck in loops: a node can appear in a path at
most twice (enough for one trip around a loop), and a branch which would visit a node a third
time is not followed.
"""

from .misc import is_cancelled


TRACE, EMIT = 0, 1


def trace_paths(graph, edge, forward, max_steps, cancel_token=None):
    """
    Returns all paths (lists of node handles) found by following up to max_steps edges, starting
    with the given edge. If forward is True, edges are followed from starting node to ending node,
    otherwise the other way. The node the search starts from is not included in the paths.

    A path is finished when it runs out of steps, when it reaches a dead end or when it loops back
    to the node where the search started. The results are not deduplicated.

    Returns None if the search was cancelled.
    """
    assert max_steps >= 1
    origin = graph.edges[edge].next_node(not forward)
    all_paths, path = [], []
    stack = [(TRACE, edge, 0)]
    while stack:
        action, e, path_len = stack.pop()
        del path[path_len:]
        if action == EMIT:
            all_paths.append(list(path))
            continue
        if is_cancelled(cancel_token):
            return None

        next_node = graph.edges[e].next_node(forward)
        path.append(next_node)
        if len(path) == max_steps:
            all_paths.append(list(path))
            continue
        next_edges = graph.next_edges(next_node, forward)
        if not next_edges:
            all_paths.append(list(path))
            continue

        # Pushed in reverse so they come off the stack in the graph's edge order.
        branches = []
        for next_edge in next_edges:
            next_next_node = graph.edges[next_edge].next_node(forward)
            if next_next_node == origin:  # a full loop - the path is complete
                branches.append((EMIT, None, len(path)))
            elif path.count(next_next_node) < 2:
                branches.append((TRACE, next_edge, len(path)))
        stack.extend(reversed(branches))
    return all_paths


def leads_only_to_node(graph, edge, forward, target, max_steps, include_reverse_complement=False,
                       cancel_token=None):
    """
    Returns whether every path of up to max_steps edges, starting with the given edge, reaches the
    target node (or its reverse complement, if include_reverse_complement is True).

    Any path which comes back around to the node the search started from makes the search fail:
    that path could be circular DNA which doesn't contain the target. Paths which run out of steps
    or reach a dead end also fail. Branches cut short by the loop rule neither pass nor fail.

    Returns None if the search was cancelled.
    """
    assert max_steps >= 1
    rc_target = graph.reverse_complement_node(target)
    path = [graph.edges[edge].next_node(not forward)]
    stack = [(edge, 1)]
    while stack:
        if is_cancelled(cancel_token):
            return None
        e, path_len = stack.pop()
        del path[path_len:]

        next_node = graph.edges[e].next_node(forward)
        path.append(next_node)
        if next_node == path[0]:
            return False
        if next_node == target or (include_reverse_complement and next_node == rc_target):
            continue
        if len(path) - 1 == max_steps:
            return False
        next_edges = graph.next_edges(next_node, forward)
        if not next_edges:
            return False

        for next_edge in reversed(next_edges):
            next_next_node = graph.edges[next_edge].next_node(forward)
            if path.count(next_next_node) < 2:
                stack.append((next_edge, len(path)))
    return True


def node_leads_only_to_node(graph, node, target, max_steps, include_reverse_complement=False,
                            cancel_token=None):
    """
    Returns whether any of the node's edges (followed away from the node) lead only to the target.
    Returns None if the search was cancelled.
    """
    for edge in graph.incident_edges(node):
        forward = graph.edges[edge].start == node
        result = leads_only_to_node(graph, edge, forward, target, max_steps,
                                    include_reverse_complement, cancel_token)
        if result is None:
            return None
        if result:
            return True
    return False


def nodes_common_to_all_paths(graph, paths, include_reverse_complements=False):
    """
    Returns the nodes which appear in every one of the paths, in the order they appear in the
    first path. With include_reverse_complements, a node also counts as being in a path if its
    reverse complement is, and both strands are returned.
    """
    if not paths:
        return []
    common = list(dict.fromkeys(paths[0]))
    if include_reverse_complements:
        common = list(dict.fromkeys(common + [graph.reverse_complement_node(n) for n in common]))
    for path in paths[1:]:
        path_nodes = set(path)
        if include_reverse_complements:
            path_nodes |= {graph.reverse_complement_node(n) for n in path}
        common = [n for n in common if n in path_nodes]
    return common
