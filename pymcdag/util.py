"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Various utility functions
"""

import functools
import itertools
import math


def window(seq, n=2):
    """Returns a sliding window (of width n) over data from the iterable
    s -> (s0,s1,...s[n-1]), (s1,s2,...,sn), ..."""
    it = iter(seq)
    result = tuple(itertools.islice(it, n))
    if len(result) == n:
        yield result
    for elem in it:
        result = result[1:] + (elem,)
        yield result


def gcd(a, b):
    """ Return greatest common divisor."""
    return math.gcd(a, b)


def lcm(a, b):
    """ Return lowest common multiple."""
    return (a * b) // gcd(a, b)


def LCM(terms):
    """Return lcm of a list of numbers."""
    return functools.reduce(lcm, terms)


# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4
