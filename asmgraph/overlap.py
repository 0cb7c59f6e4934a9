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

import random

from .edge import AUTO_DETERMINED_EXACT_OVERLAP


def test_exact_overlap(graph, edge, overlap):
    """
    Returns whether the last `overlap` bases of the edge's starting node exactly match the first
    `overlap` bases of its ending node.
    """
    e = graph.edges[edge]
    start_node, end_node = graph.nodes[e.start], graph.nodes[e.end]
    start_offset = start_node.length - overlap
    for j in range(overlap):
        if start_node.get_base_at(start_offset + j) != end_node.get_base_at(j):
            return False
    return True


def get_overlap_search_range(graph, edge, min_overlap, max_overlap):
    """
    Returns the inclusive (min, max) range of overlaps worth trying for this edge, or None if the
    edge's nodes are too short for any overlap in the requested range.
    """
    e = graph.edges[edge]
    min_possible_overlap = min(graph.nodes[e.start].length, graph.nodes[e.end].length)
    if min_possible_overlap < min_overlap:
        return None
    return min(min_possible_overlap, min_overlap), min(min_possible_overlap, max_overlap)


def auto_determine_exact_overlap(graph, edge, min_overlap, max_overlap, rng=None):
    """
    Tries each overlap in the range and sets the first one that works (or 0 if none do). To avoid
    biasing the result toward larger or smaller overlaps, the search starts at a random point in
    the range and wraps around. The edge's reverse complement gets the same overlap. Returns the
    overlap.
    """
    if rng is None:
        rng = random.Random()
    e = graph.edges[edge]
    rc_e = graph.edges[e.reverse_complement]
    e.set_overlap(0, AUTO_DETERMINED_EXACT_OVERLAP)
    rc_e.set_overlap(0, AUTO_DETERMINED_EXACT_OVERLAP)

    search_range = get_overlap_search_range(graph, edge, min_overlap, max_overlap)
    if search_range is None:
        return 0
    range_min, range_max = search_range

    test_overlap = rng.randint(range_min, range_max)
    for _ in range(range_min, range_max + 1):
        if test_exact_overlap(graph, edge, test_overlap):
            e.set_overlap(test_overlap, AUTO_DETERMINED_EXACT_OVERLAP)
            rc_e.set_overlap(test_overlap, AUTO_DETERMINED_EXACT_OVERLAP)
            return test_overlap
        test_overlap += 1
        if test_overlap > range_max:
            test_overlap = range_min
    return 0


def auto_determine_all_overlaps(graph, settings):
    """
    Determines exact overlaps for every edge in the graph, doing each edge/reverse-complement pair
    once. Returns the number of edge pairs which got a non-zero overlap.
    """
    positive_edges = graph.sorted_edges(graph.positive_edges())
    rng = settings.get_random()
    plural = 'edge' if len(positive_edges) == 1 else 'edges'
    print(f'\nDetermining exact overlaps for {len(positive_edges)} {plural}...', flush=True,
          end='')
    found_count = 0
    for edge in positive_edges:
        overlap = auto_determine_exact_overlap(graph, edge,
                                               settings.min_auto_find_edge_overlap,
                                               settings.max_auto_find_edge_overlap, rng)
        if overlap > 0:
            found_count += 1
    print(f' {found_count} found')
    return found_count
