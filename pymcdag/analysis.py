""" Scheduling table generation for mixed-criticality DAGs

| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

This module contains the table builder.
It should be imported in scripts that build scheduling tables.

One table is built per criticality level, the most critical level first:
the HI tables backward in time from the deadline of every DAG instance,
the LO table last and forward in time, since its promotions depend on the
finished table of level 1.
"""

import logging

from . import options
from . import propagation
from . import schedulers
from . import table_analysis
from .activation import ReadyTracker
from .timeline import timeline_for_level

logger = logging.getLogger(__name__)


class NotSchedulableException(Exception):
    """ Thrown if the system is not schedulable """
    def __init__(self, value):
        super(NotSchedulableException, self).__init__()
        self.value = value

    def __str__(self):
        return str(self.value)


class Infeasibility:
    """ Describes why and where the table generation gave up """

    def __init__(self, level, slot, reason, actors=None):
        # # criticality level of the table under construction
        self.level = level
        # # absolute slot at which the problem was detected
        self.slot = slot
        # # human readable description
        self.reason = reason
        # # names of the offending actors
        self.actors = sorted(a.name for a in actors) if actors else list()

    def __repr__(self):
        s = "level %d, slot %d: %s" % (self.level, self.slot, self.reason)
        if self.actors:
            s += " (%s)" % ", ".join(self.actors)
        return s


class SchedulingTable:
    """ cells[level][slot][core] holds the name of the allocated actor
    or None if the core is idle """

    def __init__(self, levels, hyperperiod, cores):
        self.levels = levels
        self.hyperperiod = hyperperiod
        self.cores = cores
        self.cells = [[[None] * cores for _ in range(hyperperiod)]
                      for _ in range(levels)]

    def __eq__(self, other):
        if not isinstance(other, SchedulingTable):
            return NotImplemented
        return self.cells == other.cells

    def __ne__(self, other):
        return not self == other

    def assign(self, level, slot, core, name):
        assert self.cells[level][slot][core] is None, \
            "core %d already allocated at slot %d in level %d" % (core, slot, level)
        assert name not in self.cells[level][slot], \
            "%s allocated twice at slot %d in level %d" % (name, slot, level)
        self.cells[level][slot][core] = name

    def get(self, level, slot, core):
        return self.cells[level][slot][core]

    def slot_occupants(self, level, slot):
        """ names of the actors running in slot """
        return [n for n in self.cells[level][slot] if n is not None]

    def core_row(self, level, core):
        """ the sequence of actors on core over the hyperperiod """
        return [self.cells[level][s][core] for s in range(self.hyperperiod)]

    def count(self, level, name, slots):
        """ number of cells of name in the given slots of level """
        n = 0
        for s in slots:
            for c in self.cells[level][s]:
                if c == name:
                    n += 1
        return n

    def cells_of(self, level, name):
        """ list of (slot, core) allocated to name in level """
        return [(s, c) for s in range(self.hyperperiod) for c in range(self.cores)
                if self.cells[level][s][c] == name]

    def as_lists(self):
        return [[list(row) for row in lvl] for lvl in self.cells]

    def format(self, level, idle='-'):
        """ one line per core """
        lines = list()
        lines.append("Scheduling table in level %d:" % level)
        for c in range(self.cores):
            row = [n if n is not None else idle for n in self.core_row(level, c)]
            lines.append("core %d: " % c + " | ".join(row))
        return "\n".join(lines)

    def __repr__(self):
        return "\n".join(self.format(l) for l in range(self.levels - 1, -1, -1))


class ScheduleResult:
    """ This class stores the outcome of a table generation """

    def __init__(self, system, scheduler, hyperperiod, table=None,
                 infeasibility=None, statistics=None):
        self.system = system
        self.scheduler = scheduler
        self.hyperperiod = hyperperiod
        # # finished tables, None if the system is not schedulable
        self.table = table
        # # reason of failure, None if the system is schedulable
        self.infeasibility = infeasibility
        # # table_analysis.TableStatistics of the finished tables
        self.statistics = statistics

    @property
    def feasible(self):
        return self.infeasibility is None

    def raise_for_infeasibility(self):
        """ Raises NotSchedulableException if no table could be built """
        if self.infeasibility is not None:
            raise NotSchedulableException(self.infeasibility)

    def __repr__(self):
        if self.feasible:
            return "schedulable (%s, H=%d)" % (self.scheduler, self.hyperperiod)
        return "not schedulable (%s): %r" % (self.scheduler, self.infeasibility)


class BuildState:
    """ Mutable state of the table of one level.
    Owned by the builder, never shared between two builds.
    """

    def __init__(self, system, level, table):
        self.system = system
        self.level = level
        self.table = table
        self.timeline = timeline_for_level(level)

        # # remaining execution time of the current instance, per actor key
        self.remaining = dict()

        # # weights and delay flags of the current slot
        self.weights = dict()
        self.delayed = dict()

        self.tracker = ReadyTracker(system, level, self.timeline, self.remaining)


class TableBuilder:
    """ Builds the scheduling tables of all levels of a system

    :param system: the system
    :type system: model.System
    :param scheduler: ranking policy, by default the one selected in the options
    :type scheduler: schedulers.Scheduler
    """

    def __init__(self, system, scheduler=None):
        if scheduler is None:
            scheduler = schedulers.get_scheduler()
        self.system = system
        self.scheduler = scheduler
        self.table = None

    def build(self):
        """ Builds all tables and returns a ScheduleResult.
        Raises model.ModelError if the system model is malformed.
        """
        s = self.system
        s.validate()

        hyperperiod = s.hyperperiod
        self.table = SchedulingTable(s.levels, hyperperiod, s.cores)

        for d in s.dags:
            propagation.calculate_deadlines(d, s.levels)
        propagation.check_deadlines(s)

        logger.info("building %d tables of %d slots on %d cores (%s)"
                    % (s.levels, hyperperiod, s.cores, self.scheduler))

        # more critical tables first, LO last
        for level in list(range(s.levels - 1, 0, -1)) + [0]:
            infeasibility = self.build_level(level)
            if infeasibility is not None:
                logger.info("not schedulable: %r" % infeasibility)
                return ScheduleResult(s, self.scheduler, hyperperiod,
                                      infeasibility=infeasibility)

        if options.get_opt('print_tables'):
            logger.info("\n%r" % self.table)

        statistics = table_analysis.analyze_tables(self.table, s)
        logger.info("schedulable, %d preemptions for %d activations"
                    % (statistics.total_preemptions(), statistics.total_activations()))

        return ScheduleResult(s, self.scheduler, hyperperiod, table=self.table,
                              statistics=statistics)

    def build_level(self, level):
        """ Allocates the table of level slot by slot.
        Returns None on success or an Infeasibility.
        """
        s = self.system
        state = BuildState(s, level, self.table)
        tracker = state.tracker
        timeline = state.timeline
        last = None

        for slot in timeline.slots(self.table.hyperperiod):
            last = slot
            overrun = tracker.reactivate(slot)
            if overrun:
                return Infeasibility(level, slot, "instance overrun, actors still "
                                     "ready at the next activation", overrun)

            state.weights.clear()
            state.delayed.clear()
            ready = self.scheduler.rank(tracker.ready, slot, level, state)

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("level %d @t = %d, ready: %s" % (level, slot, "; ".join(
                    "%s=%s" % (a.name, state.weights[a]) for a in ready)))

            infeasibility = self.verify_constraints(ready, slot, level, state)
            if infeasibility is not None:
                return infeasibility

            finished = list()
            for core, a in zip(timeline.cores(s.cores), ready):
                if self.scheduler.is_delayed(a, slot, level, state):
                    break
                self.table.assign(level, slot, core, a.name)
                state.remaining[a.key] -= 1
                if state.remaining[a.key] == 0:
                    finished.append(a)

            for a in finished:
                tracker.complete(a)

        if len(tracker) > 0:
            return Infeasibility(level, last, "ready list not empty at the end "
                                 "of the hyperperiod", tracker.ready)
        return None

    def verify_constraints(self, ready, slot, level, state):
        """ Checks if it is still worth computing the table """
        negative = [a for a in ready if state.weights[a] < 0]
        if negative:
            return Infeasibility(level, slot, "negative laxity", negative)

        urgent = [a for a in ready if state.weights[a] == 0]
        if len(urgent) > self.system.cores:
            return Infeasibility(level, slot, "%d zero laxity actors for %d cores"
                                 % (len(urgent), self.system.cores), urgent)
        return None


def build_tables(system, scheduler=None):
    """ Builds the scheduling tables of all levels of system.
    This is the main entry point for scripts.

    :param system: the system
    :type system: model.System
    :param scheduler: a schedulers.Scheduler instance or scheduler name
    :rtype: ScheduleResult
    """
    if scheduler is None or isinstance(scheduler, str):
        scheduler = schedulers.get_scheduler(scheduler)
    return TableBuilder(system, scheduler).build()


# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4
