"""
This module contains some tests for asmgraph. To run them, execute `pytest` from the root
asmgraph directory.

Copyright 2024 Ryan Wick (rrwick@gmail.com)

This file is part of asmgraph. asmgraph is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. asmgraph is distributed
in the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with asmgraph.
If not, see <https://www.gnu.org/licenses/>.
"""

import gzip
import zipfile
import pytest

import asmgraph.misc
import asmgraph.query
from asmgraph.query import Hit, Query, Queries
from asmgraph.sci_not import SciNot


def make_hit(query, node, query_start, query_end, node_start=1, node_end=10, e_value='1e-10'):
    return Hit(query, node, 100.0, query_end - query_start + 1, 0, 0, query_start, query_end,
               node_start, node_end, e_value)


def test_hit():
    q = Query('q', 'A' * 50)
    h = make_hit(q, 3, 11, 30, 81, 100)
    assert h.node_length() == 20
    assert h.query_length() == 20
    assert h.query_start_fraction() == pytest.approx(0.2)
    assert h.query_end_fraction() == pytest.approx(0.6)
    assert h.get_hit_start() == (3, 81)
    assert h.get_hit_end() == (3, 100)
    assert h.e_value == SciNot(1.0, -10)


def test_hit_bad_coordinates():
    q = Query('q', 'A' * 50)
    with pytest.raises(AssertionError):
        make_hit(q, 0, 30, 20)
    with pytest.raises(AssertionError):
        make_hit(q, 0, 1, 20, 0, 10)


def test_sequence_type():
    assert Query('a', 'ACGTACGT').sequence_type == asmgraph.misc.NUCLEOTIDE
    assert Query('b', 'MKVLAAGIVG').sequence_type == asmgraph.misc.PROTEIN
    assert Query('c', 'ACGT', asmgraph.misc.PROTEIN).length_units() == 'aa'
    assert Query('d', 'ACGT').length_units() == 'bp'


def test_add_and_clear_hits():
    q = Query('q', 'A' * 50)
    assert not q.has_hits()
    h1, h2 = make_hit(q, 0, 1, 10), make_hit(q, 2, 11, 20)
    q.add_hit(h1)
    q.add_hit(h2)
    assert q.has_hits()
    assert q.hits == [h1, h2]
    assert q.hits_for_node(2) == [h2]
    assert q.hits_for_node(4) == []
    q.clear_hits()
    assert not q.has_hits()


def test_fraction_covered_by_hits_1():
    q = Query('q', 'A' * 100)
    q.add_hit(make_hit(q, 0, 1, 20))
    q.add_hit(make_hit(q, 0, 11, 30))
    q.add_hit(make_hit(q, 0, 51, 60))
    assert q.fraction_covered_by_hits() == pytest.approx(0.4)
    assert q.fraction_covered_by_hits(q.hits[2:]) == pytest.approx(0.1)
    assert q.fraction_covered_by_hits([]) == 0.0


def test_fraction_covered_by_hits_2():
    q = Query('q', 'A' * 100)
    q.add_hit(make_hit(q, 0, 1, 100))
    q.add_hit(make_hit(q, 0, 20, 40))
    assert q.fraction_covered_by_hits() == pytest.approx(1.0)


def test_clean_query_name():
    assert asmgraph.query.clean_query_name('abc def\tghi') == 'abc_def_ghi'
    assert asmgraph.query.clean_query_name('abc...') == 'abc'
    assert asmgraph.query.clean_query_name('a.b') == 'a.b'


def test_unique_names():
    queries = Queries()
    a = queries.add_query(Query('seq', 'ACGT'))
    b = queries.add_query(Query('seq', 'ACGT'))
    c = queries.add_query(Query('seq.', 'ACGT'))
    d = queries.add_query(Query('', 'ACGT'))
    assert [q.name for q in (a, b, c, d)] == ['seq', 'seq_2', 'seq_3', 'unnamed']
    assert queries.get_query_from_name('seq_2') is b
    assert queries.get_query_from_name('seq_4') is None
    assert len(queries) == 4


def test_load_from_fasta(tmp_path, capsys):
    filename = tmp_path / 'queries.fasta.gz'
    with gzip.open(filename, 'wt') as f:
        f.write('>gene_1 some description\nACGTACGTAC\n>gene_2\nMKVLAAG\n')
    queries = Queries()
    assert queries.load_from_fasta(filename) == 2
    assert [q.name for q in queries] == ['gene_1', 'gene_2']
    assert queries.get_query_from_name('gene_2').sequence_type == asmgraph.misc.PROTEIN
    assert 'found 2 queries' in capsys.readouterr().out


def test_hits_for_display():
    queries = Queries()
    a = queries.add_query(Query('a', 'A' * 50))
    b = queries.add_query(Query('b', 'A' * 50))
    ha, hb = make_hit(a, 0, 1, 10), make_hit(b, 2, 1, 10)
    a.add_hit(ha)
    b.add_hit(hb)
    assert queries.hits_for_display() == [(a, ha), (b, hb)]
    assert queries.hits_for_display('b') == [(b, hb)]
    assert queries.hits_for_display('c') == []
    b.shown = False
    assert queries.hits_for_display() == [(a, ha)]
    assert queries.hits_for_display('b') == []
    assert queries.shown_queries() == [a]
    assert queries.all_hits() == [ha, hb]
    queries.clear_all_hits()
    assert queries.all_hits() == []


def test_load_from_fasta_zip(tmp_path):
    filename = tmp_path / 'queries.zip'
    with zipfile.ZipFile(filename, 'w') as f:
        f.writestr('queries.fasta', '>gene_1\nACGTACGTAC\n')
    queries = Queries()
    with pytest.raises(SystemExit) as e:
        queries.load_from_fasta(filename)
    assert 'cannot use zip format' in str(e.value)
    assert len(queries) == 0
