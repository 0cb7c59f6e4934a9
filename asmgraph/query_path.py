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
import math
import sys

from .misc import PROTEIN, format_int_with_commas
from .path import get_all_possible_paths
from .sci_not import SciNot


@functools.total_ordering
class QueryPath(object):
    """
    A path through the graph along with the query's hits which lie on it. The hits are in path
    order and each hit starts later in the query than the one before it.

    QueryPaths sort from best to worst, so a < b means that a is the better path.
    """
    def __init__(self, path, query, hits=None):
        self.path = path
        self.query = query
        if hits is None:
            hits = self.get_hits_on_path()
        self.hits = hits

    def __repr__(self):
        return f'query path {self.query.name}: {self.path.get_string()}, {len(self.hits)} hits'

    def get_hits_on_path(self):
        hits, previous_hit = [], None
        last_i = len(self.path.nodes) - 1
        for i, node in enumerate(self.path.nodes):
            for hit in sorted(self.query.hits_for_node(node), key=lambda h: h.query_start):
                if i == 0 and hit.node_start < self.path.start_position:
                    continue
                if i == last_i and hit.node_end > self.path.get_end_position():
                    continue
                if previous_hit is None or hit.query_start > previous_hit.query_start:
                    hits.append(hit)
                    previous_hit = hit
        return hits

    def get_mean_hit_perc_identity(self):
        total_length = sum(h.alignment_length for h in self.hits)
        if total_length == 0:
            return 0.0
        return sum(h.percent_identity * h.alignment_length for h in self.hits) / total_length

    def get_evalue_product(self):
        """
        Multiplies the hits' e-values together. Where neighbouring hits overlap, each hit's e-value
        is scaled down so the shared region isn't counted twice.
        """
        product = SciNot(1.0, 0)
        for i, hit in enumerate(self.hits):
            e_value = hit.e_value
            length_to_remove = 0.0
            if i > 0:
                length_to_remove += self.get_hit_overlap(self.hits[i-1], hit) / 2.0
            if i < len(self.hits) - 1:
                length_to_remove += self.get_hit_overlap(hit, self.hits[i+1]) / 2.0
            if length_to_remove > 0.0:
                hit_length = hit.node_length()
                e_value = e_value.power((hit_length - length_to_remove) / hit_length)
            product = product * e_value
        return product

    def get_hit_overlap(self, hit_1, hit_2):
        """
        Returns how many bases the two hits share. Hits on different nodes can only overlap if an
        edge joins the nodes, in which case the second hit's coordinates are shifted into the first
        node's frame.
        """
        graph = self.path.graph
        if hit_1.node == hit_2.node:
            start_1, end_1 = hit_1.node_start - 1, hit_1.node_end
            start_2, end_2 = hit_2.node_start - 1, hit_2.node_end
        else:
            edge = graph.get_edge(hit_1.node, hit_2.node)
            if edge is None:
                return 0
            shift = graph.node_length(hit_1.node) - graph.edges[edge].overlap
            start_1, end_1 = hit_1.node_start, hit_1.node_end
            start_2, end_2 = hit_2.node_start + shift, hit_2.node_end + shift
        return max(min(end_1, end_2) - max(start_1, start_2), 0)

    def get_hit_query_length(self):
        """
        The span of the query covered from the first hit to the last, always in bases (so protein
        query lengths are tripled).
        """
        if not self.hits:
            return 0
        hit_query_length = self.hits[-1].query_end - self.hits[0].query_start + 1
        if self.query.sequence_type == PROTEIN:
            hit_query_length *= 3
        return hit_query_length

    def get_relative_length_discrepancy(self):
        """
        0 means the path is exactly as long as the hits suggest, negative means it's too short and
        positive means it's too long.
        """
        if not self.hits:
            return sys.float_info.max
        hit_query_length = self.get_hit_query_length()
        return (self.path.get_length() - hit_query_length) / hit_query_length

    def get_relative_path_length(self):
        if not self.hits:
            return sys.float_info.max
        return self.path.get_length() / self.get_hit_query_length()

    def get_absolute_path_length_difference(self):
        return self.path.get_length() - self.get_hit_query_length()

    def get_absolute_path_length_difference_string(self, commas=True):
        difference = self.get_absolute_path_length_difference()
        sign = '+' if difference > 0 else ''
        if commas:
            return sign + format_int_with_commas(difference)
        return sign + str(difference)

    def query_start(self):
        return self.hits[0].query_start if self.hits else -1

    def query_end(self):
        return self.hits[-1].query_end if self.hits else -1

    def get_path_query_coverage(self):
        if not self.hits:
            return 0.0
        query_length = self.query.length()
        not_included = (self.hits[0].query_start - 1) + (query_length - self.hits[-1].query_end)
        return 1.0 - not_included / query_length

    def get_hits_query_coverage(self):
        return self.query.fraction_covered_by_hits(self.hits)

    def get_total_hit_mismatches(self):
        return sum(h.mismatches for h in self.hits)

    def get_total_hit_gap_opens(self):
        return sum(h.gap_opens for h in self.hits)

    def is_better_than(self, other):
        a_evalue, b_evalue = self.get_evalue_product(), other.get_evalue_product()
        if a_evalue != b_evalue:
            return a_evalue < b_evalue

        # Same e-value product, possibly because the paths share hits or because both are zero.
        a_identity = self.get_mean_hit_perc_identity()
        b_identity = other.get_mean_hit_perc_identity()
        if a_identity != b_identity:
            return a_identity > b_identity

        a_discrepancy = abs(self.get_relative_length_discrepancy())
        b_discrepancy = abs(other.get_relative_length_discrepancy())
        if a_discrepancy != b_discrepancy:
            return a_discrepancy < b_discrepancy

        a_coverage = self.get_hits_query_coverage()
        b_coverage = other.get_hits_query_coverage()
        if a_coverage != b_coverage:
            return a_coverage > b_coverage
        return False

    def __lt__(self, other):
        return self.is_better_than(other)

    def __eq__(self, other):
        if not isinstance(other, QueryPath):
            return NotImplemented
        return not self.is_better_than(other) and not other.is_better_than(self)

    __hash__ = None

    def is_subset_of(self, other):
        """
        Returns whether this query path's hits are a proper subset of the other's, with this path
        lying entirely within the other path.
        """
        these_hits, other_hits = set(map(id, self.hits)), set(map(id, other.hits))
        if not these_hits < other_hits:
            return False
        return other.path.contains_sub_path(self.path)

    def passes_thresholds(self, settings):
        if self.get_path_query_coverage() < settings.min_query_covered_by_path:
            return False
        if settings.min_query_covered_by_hits is not None and \
                self.get_hits_query_coverage() < settings.min_query_covered_by_hits:
            return False
        if settings.max_evalue_product is not None and \
                self.get_evalue_product() > settings.max_evalue_product:
            return False
        if settings.min_mean_hit_identity is not None and \
                self.get_mean_hit_perc_identity() < settings.min_mean_hit_identity:
            return False
        relative_length = self.get_relative_path_length()
        if settings.min_length_percentage is not None and \
                relative_length < settings.min_length_percentage:
            return False
        if settings.max_length_percentage is not None and \
                relative_length > settings.max_length_percentage:
            return False
        length_difference = self.get_absolute_path_length_difference()
        if settings.min_length_base_discrepancy is not None and \
                length_difference < settings.min_length_base_discrepancy:
            return False
        if settings.max_length_base_discrepancy is not None and \
                length_difference > settings.max_length_base_discrepancy:
            return False
        return True


def find_query_paths(graph, query, settings, cancel_token=None):
    """
    Finds paths through the graph which could explain the query, using its hits. Paths start at
    a hit near the start of the query and end at a hit near the end of the query. The paths which
    pass the settings' thresholds are returned, best first, and are also stored in query.paths.

    Returns None if cancelled.
    """
    query.paths = []
    if not query.hits or len(query.hits) > settings.max_hits_for_query_path:
        return query.paths
    multiplier = 3 if query.sequence_type == PROTEIN else 1

    acceptable_start = 1.0 - settings.min_query_covered_by_path
    acceptable_end = settings.min_query_covered_by_path
    start_hits = [h for h in query.hits if h.query_start_fraction() <= acceptable_start]
    end_hits = [h for h in query.hits if h.query_end_fraction() >= acceptable_end]

    candidate_paths = []
    for start_hit in start_hits:
        start_node, start_position = start_hit.get_hit_start()
        for end_hit in end_hits:
            end_node, end_position = end_hit.get_hit_end()

            # The length the path should have if it matches the query from start hit to end hit.
            ideal_length = (end_hit.query_end - start_hit.query_start + 1) * multiplier
            min_length, max_length = get_path_length_range(ideal_length, settings)
            paths = get_all_possible_paths(graph, start_node, start_position,
                                           end_node, end_position,
                                           settings.max_query_path_nodes - 1,
                                           min_length, max_length, cancel_token)
            if paths is None:
                return None
            for path in paths:
                if not any(path.same_as(p) for p in candidate_paths):
                    candidate_paths.append(path)

    query_paths = [QueryPath(path, query) for path in candidate_paths]
    query_paths = [qp for qp in query_paths if qp.passes_thresholds(settings)]

    # Paths contained in a bigger path with more hits are redundant.
    query_paths = [qp for qp in query_paths
                   if not any(qp.is_subset_of(other) for other in query_paths if other is not qp)]

    query.paths = sorted(query_paths)
    return query.paths


def get_path_length_range(ideal_length, settings):
    """
    Returns the (min, max) lengths allowed for a path which ideally would have the given length.
    """
    min_length, max_length = 1, math.inf
    if settings.min_length_percentage is not None:
        min_length = max(min_length, ideal_length * settings.min_length_percentage)
    if settings.max_length_percentage is not None:
        max_length = min(max_length, ideal_length * settings.max_length_percentage)
    if settings.min_length_base_discrepancy is not None:
        min_length = max(min_length, ideal_length + settings.min_length_base_discrepancy)
    if settings.max_length_base_discrepancy is not None:
        max_length = min(max_length, ideal_length + settings.max_length_base_discrepancy)
    return min_length, max_length
