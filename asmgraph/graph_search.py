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

This module coordinates searching the graph with an external aligner. It doesn't run the aligner
itself. Instead, callers give it two functions:
  * a database builder: builder(graph, tool_paths, cancel_token) -> error string ('' if okay)
  * a search runner: runner(queries, tool_paths, extra_parameters, cancel_token)
                     -> (error string, list of hit records)
Hit records are in BLAST's tabular column order (see parse_hit_line).
"""

import shutil

from .misc import CancelToken, PROTEIN, wrap_sequence
from .query import Hit, Queries
from .query_path import find_query_paths


BLAST_PROGRAMS = ('makeblastdb', 'blastn', 'tblastn')

SUCCESS = 0
FAILED = 1
CANCELLED = 2


class GraphSearch(object):

    def __init__(self, graph, programs=BLAST_PROGRAMS):
        self.graph = graph
        self.programs = list(programs)
        self.tool_paths = {}
        self.queries = Queries()
        self.last_error = ''
        self.status = None
        self.build_token = None
        self.search_token = None

    def __repr__(self):
        return f'graph search: {len(self.queries)} queries, status {self.status}'

    def find_tools(self):
        for program in self.programs:
            program_path = shutil.which(program)
            if program_path is None:
                self.last_error = f'Error: The program {program} was not found.  ' \
                                  f'Please install NCBI BLAST to use this feature.'
                return False
            self.tool_paths[program] = program_path
        return True

    def build_database(self, builder):
        self.last_error = ''
        if not self.find_tools():
            self.status = FAILED
            return self.last_error
        if self.build_token is not None:
            self.last_error = 'Building is already in progress'
            return self.last_error

        token = CancelToken()
        self.build_token = token
        try:
            error = builder(self.graph, self.tool_paths, token)
        finally:
            self.build_token = None

        if token.cancelled:
            self.status = CANCELLED
        elif error:
            self.status, self.last_error = FAILED, error
        else:
            self.status = SUCCESS
        return self.last_error

    def do_search(self, runner, extra_parameters='', settings=None):
        """
        Runs the search for all queries. The graph's queries only get new hits if the whole search
        succeeds. If settings are given, query paths are found for each query afterward, and that
        part can be cancelled too.
        """
        self.last_error = ''
        if not self.find_tools():
            self.status = FAILED
            return self.last_error
        if self.search_token is not None:
            self.last_error = 'Search is already in progress'
            return self.last_error

        token = CancelToken()
        self.search_token = token
        try:
            self.status = self.run_search(runner, extra_parameters, settings, token)
        finally:
            self.search_token = None
        return self.last_error

    def run_search(self, runner, extra_parameters, settings, token):
        error, hit_records = runner(self.queries, self.tool_paths, extra_parameters, token)
        if token.cancelled:
            return CANCELLED
        if error:
            self.last_error = error
            return FAILED
        try:
            hits = [h for h in (self.hit_from_record(r) for r in hit_records) if h is not None]
        except ValueError as e:
            self.last_error = f'Error: could not read hit record: {e}'
            return FAILED

        self.queries.clear_all_hits()
        for hit in hits:
            hit.query.add_hit(hit)
        for query in self.queries:
            query.searched = True
        if settings is not None:
            for query in self.queries:
                if find_query_paths(self.graph, query, settings, token) is None:
                    return CANCELLED
        return SUCCESS

    def do_auto_graph_search(self, builder, runner, queries_filename, extra_parameters='',
                             settings=None):
        """
        Builds the database, loads the queries and runs the search in one go. Returns an error
        string which is empty if all goes well.
        """
        self.queries.clear()
        error = self.build_database(builder)
        if error or self.status == CANCELLED:
            return error
        self.queries.load_from_fasta(queries_filename)
        return self.do_search(runner, extra_parameters, settings)

    def cancel_database_build(self):
        if self.build_token is not None:
            self.build_token.cancel()

    def cancel_search(self):
        if self.search_token is not None:
            self.search_token.cancel()

    def hit_from_record(self, record):
        """
        Makes a Hit from a hit record, or returns None if the record's query or node isn't known.
        Hits to the opposite strand of a node are put on the node's reverse complement. A malformed
        record raises a ValueError.
        """
        if len(record) != 12:
            raise ValueError(f'expected 12 fields but found {len(record)}')
        query_name, node_name, percent_identity, alignment_length, mismatches, gap_opens, \
            query_start, query_end, node_start, node_end, e_value, bit_score = record
        query = self.queries.get_query_from_name(query_name)
        node = self.graph.get_node(node_name)
        if query is None or node is None:
            return None
        query_start, query_end = int(query_start), int(query_end)
        node_start, node_end = int(node_start), int(node_end)
        if not 1 <= query_start <= query_end:
            raise ValueError(f'bad query coordinates {query_start}-{query_end}')
        if node_start < 1 or node_end < 1:
            raise ValueError(f'bad node coordinates {node_start}-{node_end}')
        if not float(e_value) >= 0.0:
            raise ValueError(f'bad e-value {e_value}')
        if node_start > node_end:
            node = self.graph.reverse_complement_node(node)
            node_length = self.graph.node_length(node)
            node_start, node_end = node_length - node_start + 1, node_length - node_end + 1
            if node_start < 1:
                raise ValueError(f'node coordinates past the end of {node_name}')
        return Hit(query, node, float(percent_identity), int(alignment_length), int(mismatches),
                   int(gap_opens), query_start, query_end, node_start, node_end,
                   e_value, float(bit_score))

    def hits_for_display(self, query_name='all'):
        return self.queries.hits_for_display(query_name)


def parse_hit_line(line):
    """
    Splits one line of BLAST tabular output (-outfmt 6) into a hit record.
    """
    parts = line.rstrip('\n').split('\t')
    if len(parts) != 12:
        raise ValueError(f'expected 12 tab-separated fields but found {len(parts)}')
    return tuple(parts)


def program_for_query(query):
    return 'tblastn' if query.sequence_type == PROTEIN else 'blastn'


def write_nodes_fasta(graph, filename):
    """
    Writes the graph's positive nodes to a FASTA file, for building a search database. Nodes with
    missing sequences are left out. Returns the number of nodes written.
    """
    count = 0
    with open(filename, 'wt') as f:
        for node in graph.nodes:
            if node.is_positive() and not node.sequence_is_missing():
                f.write(f'>{node.name}\n')
                f.write(wrap_sequence(node.seq))
                count += 1
    return count
