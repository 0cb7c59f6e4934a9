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
import sys

from .sci_not import SciNot


class Settings(object):
    """
    Settings objects hold the tunable values used by overlap detection, path tracing and query path
    finding. They are always passed explicitly, and nothing in asmgraph reads global settings.

    Thresholds which can be switched off use None to mean 'off'.
    """
    def __init__(self, **kwargs):
        # Range of overlaps (inclusive) tried when auto-detecting exact edge overlaps:
        self.min_auto_find_edge_overlap = 10
        self.max_auto_find_edge_overlap = 200

        # Seed for the overlap search's random starting point (None gives fresh randomness):
        self.random_seed = None

        # How many steps to follow when tracing paths for contiguity:
        self.contiguity_search_steps = 15

        # Query path finding:
        self.max_query_path_nodes = 6
        self.max_hits_for_query_path = 100
        self.min_query_covered_by_path = 0.9
        self.min_query_covered_by_hits = None
        self.max_evalue_product = None
        self.min_mean_hit_identity = None
        self.min_length_percentage = 0.95
        self.max_length_percentage = 1.05
        self.min_length_base_discrepancy = None
        self.max_length_base_discrepancy = None

        for name, value in kwargs.items():
            if not hasattr(self, name):
                sys.exit(f'Error: {name} is not a recognised setting')
            setattr(self, name, value)
        if isinstance(self.max_evalue_product, str):
            self.max_evalue_product = SciNot.from_string(self.max_evalue_product)
        self.check()

    def __repr__(self):
        values = ', '.join(f'{k}={v}' for k, v in vars(self).items())
        return f'Settings({values})'

    def check(self):
        if self.min_auto_find_edge_overlap < 1:
            sys.exit('Error: min_auto_find_edge_overlap must be 1 or greater')
        if self.max_auto_find_edge_overlap < self.min_auto_find_edge_overlap:
            sys.exit('Error: max_auto_find_edge_overlap cannot be less than '
                     'min_auto_find_edge_overlap')
        if self.contiguity_search_steps < 1:
            sys.exit('Error: contiguity_search_steps must be 1 or greater')
        if self.max_query_path_nodes < 1:
            sys.exit('Error: max_query_path_nodes must be 1 or greater')
        for name in ['min_query_covered_by_path', 'min_query_covered_by_hits']:
            value = getattr(self, name)
            if value is not None and not 0.0 <= value <= 1.0:
                sys.exit(f'Error: {name} must be between 0 and 1')
        identity = self.min_mean_hit_identity
        if identity is not None and not 0.0 <= identity <= 100.0:
            sys.exit('Error: min_mean_hit_identity must be between 0 and 100')
        if self.min_length_percentage is not None and self.max_length_percentage is not None and \
                self.max_length_percentage < self.min_length_percentage:
            sys.exit('Error: max_length_percentage cannot be less than min_length_percentage')
        if self.min_length_base_discrepancy is not None and \
                self.max_length_base_discrepancy is not None and \
                self.max_length_base_discrepancy < self.min_length_base_discrepancy:
            sys.exit('Error: max_length_base_discrepancy cannot be less than '
                     'min_length_base_discrepancy')

    def get_random(self):
        """
        Returns the random source used for the overlap search. A fixed seed makes it repeatable.
        """
        return random.Random(self.random_seed)
