"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

It should be imported in scripts that build scheduling tables.
We model systems composed of periodic DAGs of actors.
Every actor carries one WCET per criticality level,
level 0 being LO and level N-1 the most critical one.
A WCET of 0 at a level means that the actor does not execute in that level.
"""

import logging

from . import util

logger = logging.getLogger("pymcdag")


class ModelError(ValueError):
    """ Raised if the system model violates an invariant
    (e.g. duplicate actor names, a cyclic graph, negative WCETs) """


class Actor:
    """ An Actor is a node of a DAG.
    It consumes one time slot of one core per unit of execution time.
    """

    def __init__(self, name, wcets, id=None, fault_tolerance_mechanism=False,
                 **kwargs):
        """ CTOR """
        # # Descriptive string, unique in the system
        self.name = name

        # # Identifier, unique in the DAG (assigned by McDag.bind_actor if None)
        self.id = id

        # # Worst-case execution times, indexed by criticality level
        self.wcets = list(wcets)

        # # Local deadlines, indexed by criticality level
        # None means the deadline was not assigned (unbounded)
        self.deadlines = [None] * len(self.wcets)

        # # Tag for the availability analysis, not used by the table generation
        self.fault_tolerance_mechanism = fault_tolerance_mechanism

        # # Link to the DAG the actor belongs to
        self.graph = None

        # # Outgoing and incoming edges
        self.snd_edges = list()
        self.rcv_edges = list()

        # After all mandatory attributes have been initialized above, load
        # those set in kwargs
        for key in kwargs:
            setattr(self, key, kwargs[key])

    def __repr__(self):
        """ Returns string representation of Actor """
        return self.name

    def wcet(self, level):
        """ WCET in the given level, 0 for levels beyond the WCET array """
        if level < len(self.wcets):
            return self.wcets[level]
        return 0

    def deadline(self, level):
        if level < len(self.deadlines):
            return self.deadlines[level]
        return None

    def set_deadline(self, level, deadline):
        if level >= len(self.deadlines):
            self.deadlines.extend([None] * (level + 1 - len(self.deadlines)))
        self.deadlines[level] = deadline

    def is_active(self, level):
        """ True if the actor executes in level """
        return self.wcet(level) > 0

    @property
    def graph_id(self):
        return self.graph.id

    @property
    def graph_period(self):
        return self.graph.period

    @property
    def key(self):
        """ Identity of the actor in the remaining-time bookkeeping """
        return (self.graph.id, self.id)

    @property
    def predecessors(self):
        return [e.src for e in self.rcv_edges]

    @property
    def successors(self):
        return [e.dst for e in self.snd_edges]

    def predecessors_in(self, level):
        """ predecessors that are active in level """
        return [a for a in self.predecessors if a.is_active(level)]

    def successors_in(self, level):
        """ successors that are active in level """
        return [a for a in self.successors if a.is_active(level)]

    def is_source_in(self, level):
        """ An active actor without active predecessor in level """
        return self.is_active(level) and len(self.predecessors_in(level)) == 0

    def is_sink_in(self, level):
        """ An active actor without active successor in level """
        return self.is_active(level) and len(self.successors_in(level)) == 0


class Edge:
    """ A precedence constraint between two actors of the same DAG """

    def __init__(self, src, dst):
        """ CTOR """
        self.src = src
        self.dst = dst

    def __repr__(self):
        return "%s -> %s" % (self.src, self.dst)


class McDag:
    """ A mixed-criticality DAG.
    All actors of the DAG are released every period,
    which is also the deadline of the DAG.
    """

    def __init__(self, id, period, name=None):
        """ CTOR """
        # # Identifier, unique in the system
        self.id = id

        # # Period and (implicit) deadline
        self.period = period

        # # Name
        if name is None:
            name = "D%s" % id
        self.name = name

        # # Actors in binding order
        self.actors = list()

        # # Edges in linking order
        self.edges = list()

    def __repr__(self):
        return "%s(P=%s)" % (self.name, self.period)

    def bind_actor(self, a):
        """ Add actor a to the DAG.
        Returns a """
        if a.graph is not None and a.graph is not self:
            raise ModelError("actor %s is already bound to %s" % (a.name, a.graph))
        if a.id is None:
            used = [x.id for x in self.actors]
            a.id = max(used) + 1 if len(used) > 0 else 0
        a.graph = self
        self.actors.append(a)
        return a

    def link(self, src, dst):
        """ Link a dependent actor dst to the actor src.
        dst may only start after src has completed.
        Returns the new edge """
        for a in (src, dst):
            if a.graph is not self:
                raise ModelError("cannot link %s -> %s: %s is not part of %s"
                                 % (src, dst, a, self))
        e = Edge(src, dst)
        src.snd_edges.append(e)
        dst.rcv_edges.append(e)
        self.edges.append(e)
        return e

    def get_actor(self, name):
        for a in self.actors:
            if a.name == name:
                return a
        raise KeyError(name)

    def sources_in(self, level):
        return [a for a in self.actors if a.is_source_in(level)]

    def sinks_in(self, level):
        return [a for a in self.actors if a.is_sink_in(level)]

    def utilization(self, level):
        """ Workload of the DAG in level per time unit """
        return sum(a.wcet(level) for a in self.actors) / float(self.period)


class System:
    """ The System is the top-level entity of the system model.
    It contains the DAGs, the number of cores and the number of
    criticality levels.
    """

    def __init__(self, cores, levels, name=''):
        """ CTOR """
        # # Name
        self.name = name

        # # Number of identical cores
        self.cores = cores

        # # Number of criticality levels (0 = LO ... levels-1 = highest)
        self.levels = levels

        # # DAGs in binding order
        self.dags = list()

    def __repr__(self):
        """ Return a string representation of the System """
        s = 'cores: %d, levels: %d' % (self.cores, self.levels)
        s += '\ndags:'
        for d in self.dags:
            s += str(d) + ", "
        return s

    def bind_dag(self, d):
        """ Add a DAG to the System """
        self.dags.append(d)
        return d

    def actors(self):
        """ All actors of all DAGs """
        return [a for d in self.dags for a in d.actors]

    def get_actor(self, name):
        for d in self.dags:
            for a in d.actors:
                if a.name == name:
                    return a
        raise KeyError(name)

    @property
    def hyperperiod(self):
        """ Least common multiple of all DAG periods """
        return util.LCM([d.period for d in self.dags])

    def utilization(self, level):
        return sum(d.utilization(level) for d in self.dags)

    def validate(self):
        """ Check the structural invariants the table generation relies on.
        Raises ModelError on the first violation.
        """
        if not isinstance(self.cores, int) or self.cores < 1:
            raise ModelError("number of cores must be a positive integer, got %r"
                             % (self.cores,))
        if not isinstance(self.levels, int) or self.levels < 1:
            raise ModelError("number of levels must be a positive integer, got %r"
                             % (self.levels,))
        if len(self.dags) == 0:
            raise ModelError("system %r has no DAG" % self.name)

        dag_ids = set()
        names = set()
        for d in self.dags:
            if not isinstance(d.id, int):
                raise ModelError("DAG ids must be integers, got %r" % (d.id,))
            if d.id in dag_ids:
                raise ModelError("duplicate DAG id %r" % (d.id,))
            dag_ids.add(d.id)

            if not isinstance(d.period, int) or d.period <= 0:
                raise ModelError("period of %s must be a positive integer" % d.name)

            actor_ids = set()
            for a in d.actors:
                if a.name in names:
                    raise ModelError("duplicate actor name %r" % a.name)
                names.add(a.name)
                if not isinstance(a.id, int):
                    raise ModelError("actor ids must be integers, got %r" % (a.id,))
                if a.id in actor_ids:
                    raise ModelError("duplicate actor id %r in %s" % (a.id, d.name))
                actor_ids.add(a.id)
                if a.graph is not d:
                    raise ModelError("actor %s is not bound to %s" % (a.name, d.name))

                if len(a.wcets) > self.levels:
                    raise ModelError("actor %s has %d WCETs for %d levels"
                                     % (a.name, len(a.wcets), self.levels))
                for c in a.wcets:
                    if not isinstance(c, int) or c < 0:
                        raise ModelError("WCETs of %s must be non-negative "
                                         "integers, got %r" % (a.name, a.wcets))
                if a.wcet(0) == 0:
                    raise ModelError("actor %s does not execute in LO" % a.name)

            for e in d.edges:
                if e.src.graph is not d or e.dst.graph is not d:
                    raise ModelError("edge %r leaves %s" % (e, d.name))

        logger.debug("validated %d DAGs, %d actors" % (len(self.dags), len(names)))
