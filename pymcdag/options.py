"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

This module contains methods to initalize the pymcdag environment.
It will setup an argument parser and set up default parameters.
"""

SCHEDULER = 'laxity'
SCHEDULERS = ('laxity', 'hybrid')

import argparse
import logging
import sys

from pymcdag import __license_text__

parser = argparse.ArgumentParser(description='Mixed-criticality DAG scheduling')
parser.add_argument('--scheduler', type=str, choices=SCHEDULERS,
                    default=SCHEDULER,
                    help='Ranking of ready actors: laxity at every level or '
                    'EDF in HI levels with laxity in LO (default=%s)' % (SCHEDULER))
parser.add_argument('--print_tables', action='store_true',
                    help='log the finished scheduling tables')
parser.add_argument('--show', action='store_true',
                    help='Show plots (interactive).')
parser.add_argument('--verbose', '-v', action='store_true',
                    help='be more talkative')


welcome = "pyMCDAG a scheduling table generator for mixed-criticality DAGs.\n\n" \
+ __license_text__

_opts = None
_opts_dict = None


def get_opt(option):
    """ Returns the option specified by the parameter.
    If called for the first time, the parsing is done.
    """
    global _opts
    if _opts is None: init_pymcdag(implicit=True)
    return getattr(_opts, option)

def set_opt(option, value):
    """ Sets the option specified by the parameter to value.
    If called for the first time, the parsing is done.
    """
    global _opts
    if _opts is None: init_pymcdag(implicit=True)
    setattr(_opts, option, value)

def pprintTable(out, table, column_sperator="", header_separator=":"):
    """Prints out a table of data, padded for alignment
    @param out: Output stream (file-like object)
    @param table: The table to print. A list of lists.
    Each row must have the same number of columns. """

    def format(num):
        return str(num)
    def get_max_width(table1, index1):
        """Get the maximum width of the given column index"""
        return max([len(format(row1[index1])) for row1 in table1])

    col_paddings = []
    for i in range(len(table[0])):
        col_paddings.append(get_max_width(table, i))

    for row in table:
        # left col
        print(str(row[0]).ljust(col_paddings[0] + 1), end=header_separator, file=out)
        # rest of the cols
        for i in range(1, len(row)):
            col = format(row[i]).rjust(col_paddings[i] + 1)
            print(col, end=" " + column_sperator, file=out)
        print(file=out)

    return

def init_pymcdag(implicit=False):
    """ Initialize pymcdag.
    This function parses the options and prints them for reference.
    It is called once automatically from get_opt() or set_opt()
    when no explicit initialization happened.
    It can also be called directly to control when initialization happens
    in order to modify options afterwards.
    """
    global _opts, _opts_dict
    _opts_dict = dict()
    if not implicit:
        # in this case we are explicitly initialized,
        # output welcome and consume cmdline parameters
        print(welcome)
        print("invoked via: " + " ".join(sys.argv) + "\n")

        _opts = parser.parse_args()
    else:
        # implicit init, through regression test or non-pymcdag script
        # distill defaults from the parser and leave sys.argv alone
        _opts = argparse.Namespace()
        for action in parser._actions:
            if action.default == argparse.SUPPRESS:
                continue
            setattr(_opts, action.dest, action.default)

    table = list()
    for attr in dir(_opts):
        if not attr.startswith("_"):
            row = ["%s" % attr, str(getattr(_opts, attr))]
            _opts_dict[attr] = str(getattr(_opts, attr))
            table.append(row)
    if not implicit:
        pprintTable(sys.stdout, table)
        print("\n\n")
    # set up the general logging object
    if get_opt('verbose') == True:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
