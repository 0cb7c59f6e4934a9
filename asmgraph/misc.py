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

import gzip
import sys


NUCLEOTIDE = 'nucleotide'
PROTEIN = 'protein'

REV_COMP_DICT = {'A': 'T', 'T': 'A', 'G': 'C', 'C': 'G', 'a': 't', 't': 'a', 'g': 'c', 'c': 'g',
                 'R': 'Y', 'Y': 'R', 'S': 'S', 'W': 'W', 'K': 'M', 'M': 'K', 'B': 'V', 'V': 'B',
                 'D': 'H', 'H': 'D', 'N': 'N', 'r': 'y', 'y': 'r', 's': 's', 'w': 'w', 'k': 'm',
                 'm': 'k', 'b': 'v', 'v': 'b', 'd': 'h', 'h': 'd', 'n': 'n', '.': '.', '-': '-',
                 '?': '?'}

NUCLEOTIDE_CHARS = set('ACGTUN.-acgtun')


def complement_base(base):
    try:
        return REV_COMP_DICT[base]
    except KeyError:
        return 'N'


def reverse_complement(seq):
    return ''.join([complement_base(x) for x in seq][::-1])


def get_sequence_type(seq):
    """
    Guesses whether a query sequence is nucleotide or protein. Anything made only of nucleotide
    characters (and gaps/Ns) is treated as nucleotide.
    """
    if all(c in NUCLEOTIDE_CHARS for c in seq):
        return NUCLEOTIDE
    return PROTEIN


def get_compression_type(filename):
    """
    Attempts to guess the compression (if any) on a file using the first few bytes.
    http://stackoverflow.com/questions/13044562
    """
    magic_dict = {'gz': (b'\x1f', b'\x8b', b'\x08'),
                  'bz2': (b'\x42', b'\x5a', b'\x68'),
                  'zip': (b'\x50', b'\x4b', b'\x03', b'\x04')}
    max_len = max(len(x) for x in magic_dict.values())

    with open(str(filename), 'rb') as unknown_file:
        file_start = unknown_file.read(max_len)
    compression_type = 'plain'
    for file_type, magic_bytes in magic_dict.items():
        if file_start.startswith(b''.join(magic_bytes)):
            compression_type = file_type
    if compression_type == 'bz2':
        sys.exit('Error: cannot use bzip2 format - use gzip instead')
    if compression_type == 'zip':
        sys.exit('Error: cannot use zip format - use gzip instead')
    return compression_type


def get_open_func(filename):
    if get_compression_type(filename) == 'gz':
        return gzip.open
    else:  # plain text
        return open


def iterate_fasta(filename):
    """
    Takes a FASTA file as input and yields the contents as (name, info, seq) tuples. Sequences keep
    their case, because protein queries are case-sensitive for some aligners.
    """
    with get_open_func(filename)(filename, 'rt') as fasta_file:
        name = ''
        sequence = []
        for line in fasta_file:
            line = line.strip()
            if not line:
                continue
            if line[0] == '>':  # Header line = start of new record
                if name:
                    yield split_fasta_header(name) + (''.join(sequence),)
                    sequence = []
                name = line[1:]
            else:
                sequence.append(line)
        if name:
            yield split_fasta_header(name) + (''.join(sequence),)


def split_fasta_header(header):
    name_parts = header.split(maxsplit=1)
    if not name_parts:
        return '', ''
    info = '' if len(name_parts) == 1 else name_parts[1]
    return name_parts[0], info


def wrap_sequence(seq, line_length=70):
    return ''.join(seq[i:i+line_length] + '\n' for i in range(0, len(seq), line_length))


def format_int_with_commas(value):
    return f'{value:,}'


class CancelToken(object):
    """
    A CancelToken is handed to long-running traversals, which poll it once per step. The host can
    cancel it at any time (e.g. from the optional callback, which runs every `interval` polls) and
    the traversal will then stop and throw away whatever it had found so far.
    """
    def __init__(self, callback=None, interval=1):
        assert interval >= 1
        self.cancelled = False
        self.callback = callback
        self.interval = interval
        self.poll_count = 0

    def __repr__(self):
        state = 'cancelled' if self.cancelled else 'active'
        return f'cancel token: {state}, {self.poll_count} polls'

    def cancel(self):
        self.cancelled = True

    def poll(self):
        """
        Returns True if the work should stop.
        """
        self.poll_count += 1
        if self.callback is not None and self.poll_count % self.interval == 0:
            self.callback(self)
        return self.cancelled


def is_cancelled(cancel_token):
    return cancel_token is not None and cancel_token.poll()
