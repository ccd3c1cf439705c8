"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Ranking policies (schedulers) for the ready actors of a slot.

Every ready actor gets an integer weight, lower weights are more urgent.
A weight of 0 means that the actor has to run in this slot,
MAX_WEIGHT means that it must not run in this slot.
"""

import logging
import sys

from . import options

logger = logging.getLogger("pymcdag")

MAX_WEIGHT = sys.maxsize


class Scheduler:
    """ This class encapsulates the level-independent parts of the ranking.

    The state argument of all methods is the analysis.BuildState of the
    table under construction. It provides the system, the table, the build
    direction and the remaining execution times of that level.
    """

    name = None

    def __init__(self):
        pass

    def __repr__(self):
        return self.name

    def weight(self, actor, slot, level, state):
        """ Weight of a ready actor for slot in level.

        .. warning::
            This must be overridden by the actual scheduler.

        :param actor: the ready actor
        :type actor: model.Actor
        :param slot: absolute time slot which is about to be allocated
        :type slot: integer
        :param level: criticality level of the table
        :type level: integer
        :param state: build state of the table
        :type state: analysis.BuildState
        :rtype: integer
        """
        raise NotImplementedError

    def rank(self, ready, slot, level, state):
        """ Computes the weights of all ready actors and returns them
        ordered by urgency. Ties are broken by the actor ids
        (ascending when building forward, descending when building backward).
        """
        for a in ready:
            w = self.weight(a, slot, level, state)
            state.weights[a] = w
            state.delayed[a] = (w == MAX_WEIGHT)

        return sorted(ready,
                      key=lambda a: state.timeline.sort_key(state.weights[a], a))

    def is_delayed(self, actor, slot, level, state):
        """ True if actor must not be allocated in slot, even on an idle core """
        if actor not in state.delayed:
            w = self.weight(actor, slot, level, state)
            state.weights[actor] = w
            state.delayed[actor] = (w == MAX_WEIGHT)
        return state.delayed[actor]

    def laxity(self, actor, slot, level, state):
        """ Slack of actor: deadline - elapsed time in the instance - remaining time """
        elapsed = state.timeline.elapsed(slot, actor.graph_period)
        return actor.deadline(level) - elapsed - state.remaining[actor.key]

    def executed(self, actor, level, state):
        """ execution time actor already received in the current instance """
        return actor.wcet(level) - state.remaining[actor.key]

    def needs_promotion(self, actor, slot, level, state):
        """ LO: the execution received in the LO table must never lag behind
        the execution the next level received until (and including) slot.
        Otherwise a switch to the next level could not finish the actor in time.
        """
        if level + 1 >= state.system.levels or not actor.is_active(level + 1):
            return False

        window = list(state.timeline.covered_window(slot, actor.graph_period)) + [slot]
        reserved = state.table.count(level + 1, actor.name, window)
        return self.executed(actor, level, state) - reserved < 0

    def must_wait(self, actor, slot, level, state):
        """ HI (backwards): the next level must already have reserved the
        additional execution time C(L+1) - C(L) of actor, plus everything
        allocated for it in L, within the instance window built so far.
        The highest level never waits.
        """
        if level == 0 or level + 1 >= state.system.levels:
            return False

        delta = actor.wcet(level + 1) - actor.wcet(level)
        window = state.timeline.covered_window(slot, actor.graph_period)
        reserved = state.table.count(level + 1, actor.name, window)
        executed = self.executed(actor, level, state)

        if reserved - delta < executed:
            return True
        if executed > 0 and reserved - delta == executed:
            return True
        return False

    def lo_weight(self, actor, slot, level, state):
        """ Laxity in LO, 0 if the actor has to be promoted """
        if self.needs_promotion(actor, slot, level, state):
            logger.debug("promotion of %s at slot %d" % (actor.name, slot))
            return 0
        return self.laxity(actor, slot, level, state)


class LaxityScheduler(Scheduler):
    """ Least-laxity-first in every level """

    name = 'laxity'

    def weight(self, actor, slot, level, state):
        if level == 0:
            return self.lo_weight(actor, slot, level, state)

        if self.must_wait(actor, slot, level, state):
            logger.debug("%s delayed in level %d at slot %d" % (actor.name, level, slot))
            return MAX_WEIGHT
        return self.laxity(actor, slot, level, state)


class HybridScheduler(Scheduler):
    """ Earliest-deadline-first in HI levels, least-laxity-first in LO """

    name = 'hybrid'

    def weight(self, actor, slot, level, state):
        if level == 0:
            return self.lo_weight(actor, slot, level, state)

        if self.must_wait(actor, slot, level, state):
            logger.debug("%s delayed in level %d at slot %d" % (actor.name, level, slot))
            return MAX_WEIGHT
        return actor.deadline(level)


_schedulers = {
    LaxityScheduler.name: LaxityScheduler,
    HybridScheduler.name: HybridScheduler,
}


def get_scheduler(name=None):
    """ Returns a new scheduler instance for name.
    If name is None, the scheduler option is used.
    """
    if name is None:
        name = options.get_opt('scheduler')
    try:
        return _schedulers[name]()
    except KeyError:
        raise ValueError("unknown scheduler %r, choose one of %s"
                         % (name, sorted(_schedulers)))
