"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Build directions of the scheduling tables.

The LO table is built forward in time, starting with the sources of each DAG.
HI tables are built backward in time, starting at the deadline of each
DAG instance with the sinks. Both directions share the builder; everything
that depends on the direction is answered by one of the two classes below.
"""


class Forward:
    """ Slot 0 first, sources first, cores 0 .. m-1 """

    name = 'forward'

    def slots(self, hyperperiod):
        return range(hyperperiod)

    def cores(self, m):
        return range(m)

    def elapsed(self, slot, period):
        """ slots of the current instance of a DAG already built """
        return slot % period

    def instance_starts(self, slot, period):
        """ True if slot is the first one built of a DAG instance """
        return slot % period == 0

    def covered_window(self, slot, period):
        """ Absolute slots of the current instance built before slot """
        start = (slot // period) * period
        return range(start, slot)

    def seeds(self, dag, level):
        return dag.sources_in(level)

    def candidates(self, actor, level):
        """ actors that may become ready when actor completes """
        return actor.successors_in(level)

    def is_released(self, actor, level, completed):
        """ all actors actor is waiting for have completed """
        for p in actor.predecessors_in(level):
            if p not in completed:
                return False
        return True

    def sort_key(self, weight, actor):
        return (weight, actor.id, actor.graph_id)

    def __repr__(self):
        return self.name


class Backward:
    """ Last slot first, sinks first, cores m-1 .. 0 """

    name = 'backward'

    def slots(self, hyperperiod):
        return range(hyperperiod - 1, -1, -1)

    def cores(self, m):
        return range(m - 1, -1, -1)

    def elapsed(self, slot, period):
        return period - 1 - slot % period

    def instance_starts(self, slot, period):
        return (slot + 1) % period == 0

    def covered_window(self, slot, period):
        end = (slot // period + 1) * period
        return range(slot + 1, end)

    def seeds(self, dag, level):
        return dag.sinks_in(level)

    def candidates(self, actor, level):
        return actor.predecessors_in(level)

    def is_released(self, actor, level, completed):
        for s in actor.successors_in(level):
            if s not in completed:
                return False
        return True

    def sort_key(self, weight, actor):
        return (weight, -actor.id, -actor.graph_id)

    def __repr__(self):
        return self.name


FORWARD = Forward()
BACKWARD = Backward()


def timeline_for_level(level):
    """ LO is built forward, all HI levels backward """
    if level == 0:
        return FORWARD
    return BACKWARD
