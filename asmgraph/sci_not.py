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

import math


class SciNot(object):
    """
    A non-negative number stored as coefficient * 10^exponent, with the coefficient kept in
    [1, 10) (or zero). E-values get very small when multiplied together (well past what a float can
    hold), so this class lets them be combined and compared without underflowing.
    """
    def __init__(self, coefficient=0.0, exponent=0):
        assert coefficient >= 0.0
        self.coefficient = float(coefficient)
        self.exponent = int(exponent)
        self.normalise()

    @classmethod
    def from_string(cls, sci_not_str):
        """
        Parses strings like '1e-50', '2.5E-200' or '0.0'. The exponent is split off before
        conversion, so values smaller than a float can hold (e.g. '1e-400') are kept intact.
        """
        parts = str(sci_not_str).strip().lower().split('e')
        if len(parts) == 1:
            return cls(float(parts[0]), 0)
        assert len(parts) == 2
        return cls(float(parts[0]), int(parts[1]))

    @classmethod
    def from_value(cls, value):
        if isinstance(value, SciNot):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        return cls.from_string(repr(float(value)))

    def __repr__(self):
        return f'SciNot({self.coefficient}, {self.exponent})'

    def __str__(self):
        return self.to_string()

    def normalise(self):
        if self.coefficient == 0.0:
            self.exponent = 0
            return
        change = math.floor(math.log10(self.coefficient))
        self.exponent += change
        self.coefficient /= 10.0 ** change

        # Floating point error can leave the coefficient just outside of its range.
        if self.coefficient >= 10.0:
            self.coefficient /= 10.0
            self.exponent += 1
        elif self.coefficient < 1.0:
            self.coefficient *= 10.0
            self.exponent -= 1

    def is_zero(self):
        return self.coefficient == 0.0

    def __mul__(self, other):
        return SciNot(self.coefficient * other.coefficient, self.exponent + other.exponent)

    def power(self, p):
        """
        Returns this value raised to the power p. Working in log space keeps the exponent exact
        for very small values.
        """
        if self.is_zero():
            return SciNot(0.0, 0)
        log_value = p * (math.log10(self.coefficient) + self.exponent)
        exponent = math.floor(log_value)
        return SciNot(10.0 ** (log_value - exponent), exponent)

    def __pow__(self, p):
        return self.power(p)

    def sort_key(self):
        if self.is_zero():
            return 0, 0, 0.0
        return 1, self.exponent, self.coefficient

    def __eq__(self, other):
        if not isinstance(other, SciNot):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        return self.sort_key() < other.sort_key()

    def __le__(self, other):
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other):
        return self.sort_key() > other.sort_key()

    def __ge__(self, other):
        return self.sort_key() >= other.sort_key()

    def __hash__(self):
        return hash(self.sort_key())

    def to_float(self):
        """
        Note that this underflows to 0.0 for values below ~1e-308.
        """
        return self.coefficient * 10.0 ** self.exponent

    def to_string(self):
        if self.is_zero():
            return '0'
        coefficient, exponent = round(self.coefficient, 2), self.exponent
        if coefficient >= 10.0:
            coefficient, exponent = coefficient / 10.0, exponent + 1
        coefficient = f'{coefficient:.2f}'.rstrip('0').rstrip('.')
        return f'{coefficient}e{exponent}'
