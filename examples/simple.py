"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Simple example: one DAG A -> B on a single core with two criticality levels
"""

import sys

from pymcdag import model
from pymcdag import analysis
from pymcdag import options


def simple_test():
    # initialize pymcdag (read command line switches and set up default options)
    options.init_pymcdag()

    # generate a new system: one core, LO and HI
    s = model.System(cores=1, levels=2, name="simple")

    # one DAG released every 4 time slots
    d = s.bind_dag(model.McDag(0, period=4))

    # A executes in both levels (longer in HI), B is dropped in HI
    a = d.bind_actor(model.Actor("A", [1, 2]))
    b = d.bind_actor(model.Actor("B", [2]))

    # B may only start once A has completed
    d.link(a, b)

    # build the tables
    print("Building tables")
    result = analysis.build_tables(s)
    result.raise_for_infeasibility()

    print("Result:")
    print(result.table)
    print(result.statistics)

    # deadlines were computed during the build
    rows = [["actor"] + ["D%d" % l for l in range(s.levels)]]
    for actor in s.actors():
        rows.append([actor.name] + ["-" if actor.deadline(l) is None else actor.deadline(l)
                                    for l in range(s.levels)])
    options.pprintTable(sys.stdout, rows)

    if options.get_opt('show'):
        from pymcdag import plot
        plot.plot_tables(result, show=True)


if __name__ == "__main__":
    simple_test()
