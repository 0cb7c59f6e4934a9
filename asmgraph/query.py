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

import re

from .misc import iterate_fasta, get_sequence_type, PROTEIN
from .sci_not import SciNot


class Hit(object):
    """
    One alignment of part of a query to part of a node. All coordinates are 1-based and inclusive,
    and the node coordinates are always on the strand of the node the hit is stored against.
    """
    def __init__(self, query, node, percent_identity, alignment_length, mismatches, gap_opens,
                 query_start, query_end, node_start, node_end, e_value, bit_score=0.0):
        assert 1 <= query_start <= query_end
        assert 1 <= node_start <= node_end
        self.query = query
        self.node = node
        self.percent_identity = percent_identity
        self.alignment_length = alignment_length
        self.mismatches = mismatches
        self.gap_opens = gap_opens
        self.query_start = query_start
        self.query_end = query_end
        self.node_start = node_start
        self.node_end = node_end
        self.e_value = SciNot.from_value(e_value)
        self.bit_score = bit_score

    def __repr__(self):
        return f'hit {self.query.name}:{self.query_start}-{self.query_end} -> ' \
               f'node {self.node}:{self.node_start}-{self.node_end}, {self.e_value}'

    def node_length(self):
        return self.node_end - self.node_start + 1

    def query_length(self):
        return self.query_end - self.query_start + 1

    def query_start_fraction(self):
        return (self.query_start - 1) / self.query.length()

    def query_end_fraction(self):
        return self.query_end / self.query.length()

    def get_hit_start(self):
        return self.node, self.node_start

    def get_hit_end(self):
        return self.node, self.node_end


class Query(object):
    """
    A sequence which has been (or will be) aligned to the graph. Hits are kept in the order they
    were added. Once paths have been found for the query, they are stored best-first in
    self.paths.
    """
    def __init__(self, name, seq, sequence_type=None):
        self.name = name
        self.seq = seq
        self.sequence_type = get_sequence_type(seq) if sequence_type is None else sequence_type
        self.hits = []
        self.paths = []
        self.shown = True
        self.searched = False

    def __repr__(self):
        return f'query {self.name}: {self.length()} {self.length_units()}, {len(self.hits)} hits'

    def length(self):
        return len(self.seq)

    def length_units(self):
        return 'aa' if self.sequence_type == PROTEIN else 'bp'

    def add_hit(self, hit):
        assert hit.query is self
        self.hits.append(hit)

    def clear_hits(self):
        self.hits = []
        self.paths = []
        self.searched = False

    def has_hits(self):
        return len(self.hits) > 0

    def hits_for_node(self, node):
        return [h for h in self.hits if h.node == node]

    def fraction_covered_by_hits(self, hits=None):
        """
        Returns the fraction of the query's positions covered by at least one of the hits (all of
        this query's hits if none are given).
        """
        if hits is None:
            hits = self.hits
        query_length = self.length()
        if query_length == 0:
            return 0.0
        covered, covered_end = 0, 0
        for start, end in sorted((h.query_start, h.query_end) for h in hits):
            start = max(start, covered_end + 1)
            end = min(end, query_length)
            if end >= start:
                covered += end - start + 1
                covered_end = end
        return covered / query_length


class Queries(object):
    """
    The set of all queries, with unique names, in the order they were added.
    """
    def __init__(self):
        self.queries = []

    def __len__(self):
        return len(self.queries)

    def __iter__(self):
        return iter(self.queries)

    def add_query(self, query):
        query.name = self.get_unique_name(clean_query_name(query.name))
        self.queries.append(query)
        return query

    def get_unique_name(self, name):
        if not name:
            name = 'unnamed'
        final_name, query_number = name, 2
        while self.get_query_from_name(final_name) is not None:
            final_name = f'{name}_{query_number}'
            query_number += 1
        return final_name

    def get_query_from_name(self, name):
        for query in self.queries:
            if query.name == name:
                return query
        return None

    def load_from_fasta(self, filename):
        """
        Adds a query for each sequence in the FASTA file and returns how many were added. Only the
        part of each header before the first space is used for the name.
        """
        print(f'\nLoading queries from {filename}...', flush=True, end='')
        queries_before = len(self.queries)
        for name, _, seq in iterate_fasta(filename):
            self.add_query(Query(name, seq))
        added = len(self.queries) - queries_before
        plural = 'query' if added == 1 else 'queries'
        print(f' found {added} {plural}')
        return added

    def shown_queries(self):
        return [q for q in self.queries if q.shown]

    def all_hits(self):
        return [h for q in self.queries for h in q.hits]

    def clear_all_hits(self):
        for query in self.queries:
            query.clear_hits()

    def clear(self):
        self.queries = []

    def hits_for_display(self, query_name='all'):
        """
        Returns (query, hit) pairs for the selected query ('all' for every query), skipping any
        queries which have been hidden.
        """
        if query_name == 'all':
            queries = self.queries
        else:
            query = self.get_query_from_name(query_name)
            queries = [] if query is None else [query]
        return [(q, h) for q in queries if q.shown for h in q.hits]


def clean_query_name(name):
    """
    Aligners stop names at whitespace and drop trailing dots, so names are cleaned up to make sure
    hits can be matched back to their query.
    """
    name = re.sub(r'\s', '_', name)
    return name.rstrip('.')
