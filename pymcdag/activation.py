"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Bookkeeping of ready actors while a scheduling table is built.
An actor is ready once every actor it waits for has completed in the current
instance of its DAG (predecessors when building forward, successors when
building backward). Every period, all actors of a DAG are released again.
"""

import logging

logger = logging.getLogger("pymcdag")


class ReadyTracker:
    """ Ready list and completed set of one level.

    :param system: the system
    :type system: model.System
    :param level: the criticality level of the table under construction
    :param timeline: build direction (timeline.FORWARD or timeline.BACKWARD)
    :param remaining: remaining execution time per actor key, shared with the builder
    :type remaining: dict
    """

    def __init__(self, system, level, timeline, remaining):
        self.system = system
        self.level = level
        self.timeline = timeline
        self.remaining = remaining

        # # actors that may be allocated now, in activation order
        self.ready = list()

        # # actors that received their full WCET in the current instance
        self.completed = set()

    def __contains__(self, actor):
        return actor in self.ready

    def __len__(self):
        return len(self.ready)

    def pending(self, dag):
        """ ready actors of dag """
        return [a for a in self.ready if a.graph is dag]

    def _add(self, actor):
        if actor not in self.ready and self.remaining[actor.key] != 0:
            self.ready.append(actor)

    def reactivate(self, slot):
        """ Release a new instance of every DAG whose instance starts at slot.
        Resets the remaining time of its actors and seeds the ready list
        with its sources (forward) or sinks (backward).

        Returns the actors that were still ready from the previous
        instance of a released DAG, i.e. that missed their instance.
        """
        overrun = list()
        for d in self.system.dags:
            if not self.timeline.instance_starts(slot, d.period):
                continue

            logger.debug("level %d: %s activation at slot %d" % (self.level, d.name, slot))
            late = self.pending(d)
            if len(late) > 0:
                overrun.extend(late)
                continue

            for a in d.actors:
                self.completed.discard(a)
                self.remaining[a.key] = a.wcet(self.level)

            for a in self.timeline.seeds(d, self.level):
                self._add(a)
        return overrun

    def complete(self, actor):
        """ actor received its full WCET, release the actors waiting for it """
        assert self.remaining[actor.key] == 0
        self.ready.remove(actor)
        self.completed.add(actor)

        for c in self.timeline.candidates(actor, self.level):
            if self.timeline.is_released(c, self.level, self.completed):
                self._add(c)
