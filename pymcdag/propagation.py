""" Deadline propagation over mixed-criticality DAGs.

| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Every actor that executes in a level gets a local deadline in that level
(its latest finishing time relative to the release of its DAG).
Sinks inherit the period of their DAG, all other actors have to finish
early enough for their successors to meet their own deadlines:

    d_L(a) = min { d_L(s) - C_L(s) | s active successor of a in L }

The propagation visits the DAG backwards from the sinks and only visits
an actor once all of its active successors have a deadline.
"""

import logging
from collections import deque

from .model import ModelError

logger = logging.getLogger("pymcdag")


def local_deadline(actor, level, period):
    """ Deadline of actor in level,
    the deadlines of all active successors must be known """
    if actor.is_sink_in(level):
        return period

    return min(s.deadline(level) - s.wcet(level)
               for s in actor.successors_in(level))


def _successors_visited(actor, level, visited):
    for s in actor.successors_in(level):
        if s not in visited:
            return False
    return True


def propagate_deadlines(dag, level):
    """ Assigns the local deadlines of all actors of dag that are active in level.
    The subgraph of level L consists of all actors with C_L > 0.
    Actors that cannot be reached (i.e. the subgraph has a cycle)
    keep an unassigned deadline.

    :param dag: the DAG
    :type dag: model.McDag
    :param level: the criticality level
    :type level: integer
    :rtype: dict (actor name -> deadline)
    """
    for a in dag.actors:
        a.set_deadline(level, None)

    visited = set()
    to_visit = deque(dag.sinks_in(level))
    queued = set(to_visit)

    while len(to_visit) > 0:
        a = to_visit.popleft()
        a.set_deadline(level, local_deadline(a, level, dag.period))
        visited.add(a)

        for p in a.predecessors_in(level):
            if p not in visited and p not in queued \
                    and _successors_visited(p, level, visited):
                to_visit.append(p)
                queued.add(p)

    unassigned = [a for a in dag.actors if a.is_active(level) and a not in visited]
    if len(unassigned) > 0:
        logger.warning("%s: no deadline in level %d for %s" % (dag.name, level, unassigned))

    return dict((a.name, a.deadline(level)) for a in dag.actors if a.is_active(level))


def calculate_deadlines(dag, levels):
    """ Propagate the deadlines of dag in all levels """
    for level in range(levels):
        propagate_deadlines(dag, level)

    for a in dag.actors:
        logger.debug("%s: %s deadlines %s" % (dag.name, a.name,
                     [a.deadline(l) for l in range(levels)]))


def check_deadlines(system):
    """ Every actor executing in a level must have a deadline in that level.
    Raises ModelError otherwise (e.g. for a cyclic graph).
    """
    for d in system.dags:
        for a in d.actors:
            for level in range(system.levels):
                if a.is_active(level) and a.deadline(level) is None:
                    raise ModelError("%s has no deadline in level %d, "
                                     "%s has no sink reaching it" % (a.name, level, d.name))
