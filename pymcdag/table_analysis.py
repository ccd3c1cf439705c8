""" Post-analysis of finished scheduling tables

| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

This module counts preemptions, migrations and context switches
in scheduling tables. The tables are only read.
"""

import logging

from . import util

logger = logging.getLogger("pymcdag")


class TableStatistics:
    """ This class stores all counters of a set of tables """

    def __init__(self, preemptions, migrations, context_switches, activations):
        # # {level: {actor name: preemptions}}
        self.preemptions = preemptions
        # # {level: {actor name: migrations}}
        self.migrations = migrations
        # # {level: context switches}
        self.context_switches = context_switches
        # # {level: released jobs in one hyperperiod}
        self.activations = activations

    def task_preemptions(self):
        """ preemptions per actor, summed over all levels """
        total = dict()
        for per_task in self.preemptions.values():
            for name, n in per_task.items():
                total[name] = total.get(name, 0) + n
        return total

    def total_preemptions(self):
        return sum(self.task_preemptions().values())

    def total_migrations(self):
        return sum(sum(m.values()) for m in self.migrations.values())

    def total_activations(self):
        return sum(self.activations.values())

    def __repr__(self):
        return "preemptions: %d, migrations: %d, context switches: %d, " \
            "activations: %d" % (self.total_preemptions(), self.total_migrations(),
                                 sum(self.context_switches.values()),
                                 self.total_activations())


def _instances(actor, hyperperiod):
    """ slot ranges of all instances of the DAG of actor """
    p = actor.graph_period
    for k in range(hyperperiod // p):
        yield range(k * p, (k + 1) * p)


def _running_core(table, level, slot, name):
    for c in range(table.cores):
        if table.cells[level][slot][c] == name:
            return c
    return None


def count_preemptions(table, system):
    """ Counts for every actor and level how often the actor stops
    executing before it received its full WCET of the instance.

    :param table: the finished tables
    :type table: analysis.SchedulingTable
    :param system: the system the tables were built for
    :type system: model.System
    :rtype: dict ({level: {actor name: preemptions}})
    """
    preemptions = dict()
    for level in range(table.levels):
        per_task = dict()
        for a in system.actors():
            if not a.is_active(level):
                continue
            n = 0
            for instance in _instances(a, table.hyperperiod):
                executed = 0
                running = False
                for slot in instance:
                    now = _running_core(table, level, slot, a.name) is not None
                    if now:
                        executed += 1
                    elif running and executed < a.wcet(level):
                        n += 1
                    running = now
            per_task[a.name] = n
        preemptions[level] = per_task
    return preemptions


def count_migrations(table, system):
    """ Counts for every actor and level how often the actor continues
    its execution in the next slot on a different core.
    """
    migrations = dict()
    for level in range(table.levels):
        per_task = dict()
        for a in system.actors():
            if not a.is_active(level):
                continue
            n = 0
            for instance in _instances(a, table.hyperperiod):
                cores = [_running_core(table, level, s, a.name) for s in instance]
                for c1, c2 in util.window(cores):
                    if c1 is not None and c2 is not None and c1 != c2:
                        n += 1
            per_task[a.name] = n
        migrations[level] = per_task
    return migrations


def count_context_switches(table):
    """ Counts per level how often a core starts running an actor
    different from the one it ran in the previous slot.
    """
    switches = dict()
    for level in range(table.levels):
        n = 0
        for c in range(table.cores):
            previous = None
            for name in table.core_row(level, c):
                if name is not None and name != previous:
                    n += 1
                previous = name
        switches[level] = n
    return switches


def count_activations(system, hyperperiod):
    """ Number of jobs released per level within one hyperperiod """
    activations = dict()
    for level in range(system.levels):
        activations[level] = sum(hyperperiod // a.graph_period
                                 for a in system.actors() if a.is_active(level))
    return activations


def analyze_tables(table, system):
    """ Returns the TableStatistics of finished tables """
    statistics = TableStatistics(count_preemptions(table, system),
                                 count_migrations(table, system),
                                 count_context_switches(table),
                                 count_activations(system, table.hyperperiod))

    for level in sorted(statistics.preemptions):
        for name, n in sorted(statistics.preemptions[level].items()):
            if n > 0:
                logger.debug("level %d: %s preempted %d times" % (level, name, n))
    return statistics
