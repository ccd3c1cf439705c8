"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Two DAGs with different periods on two cores.
The tables are built with both schedulers: the laxity variant gives up
in HI, EDF in the HI levels finds tables.
"""

from pymcdag import model
from pymcdag import analysis
from pymcdag import graph
from pymcdag import options


def hybrid_test():
    options.init_pymcdag()

    s = model.System(cores=2, levels=2, name="fork-join")

    # fork-join DAG, the branch B is dropped in HI
    d0 = s.bind_dag(model.McDag(0, period=6, name="fork_join"))
    src = d0.bind_actor(model.Actor("S", [1, 1]))
    a = d0.bind_actor(model.Actor("A", [2, 3]))
    b = d0.bind_actor(model.Actor("B", [2, 0]))
    j = d0.bind_actor(model.Actor("J", [1, 1]))
    d0.link(src, a)
    d0.link(src, b)
    d0.link(a, j)
    d0.link(b, j)

    # a single actor released twice per hyperperiod
    d1 = s.bind_dag(model.McDag(1, period=3, name="sensor"))
    d1.bind_actor(model.Actor("C", [1, 2]))

    print("hyperperiod: %d" % s.hyperperiod)
    for l in range(s.levels):
        print("utilization in level %d: %.2f" % (l, s.utilization(l)))

    for name in ('laxity', 'hybrid'):
        result = analysis.build_tables(s, name)
        print(result)
        if result.feasible:
            print(result.table)
            print(result.statistics)

    # the topology, with the deadlines of the last build
    print(graph.graph_system(s, deadlines=True).string())


if __name__ == "__main__":
    hybrid_test()
