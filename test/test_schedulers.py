"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Tests of the ranking policies
"""

import unittest

import pytest

from pymcdag import analysis
from pymcdag import model
from pymcdag import options
from pymcdag import propagation
from pymcdag import schedulers


def _state(system, level, table=None):
    if table is None:
        table = analysis.SchedulingTable(system.levels, system.hyperperiod, system.cores)
    for d in system.dags:
        propagation.calculate_deadlines(d, system.levels)
    return analysis.BuildState(system, level, table)


class LaxityTest(unittest.TestCase):

    def setUp(self):
        self.s = model.System(cores=1, levels=2)
        d = self.s.bind_dag(model.McDag(0, period=4))
        self.a = d.bind_actor(model.Actor("A", [1, 2]))
        self.b = d.bind_actor(model.Actor("B", [2]))
        d.link(self.a, self.b)

    def test_lo_laxity(self):
        state = _state(self.s, 0)
        state.remaining[self.a.key] = 1
        state.remaining[self.b.key] = 2
        sched = schedulers.LaxityScheduler()
        # A has deadline 2 in LO
        self.assertEqual(sched.weight(self.a, 0, 0, state), 1)
        self.assertEqual(sched.weight(self.b, 1, 0, state), 1)
        self.assertEqual(sched.weight(self.b, 2, 0, state), 0)

    def test_hi_laxity_counts_from_the_instance_end(self):
        state = _state(self.s, 1)
        state.remaining[self.a.key] = 2
        sched = schedulers.LaxityScheduler()
        # A is a sink in HI: deadline 4, slot 3 is the first slot built
        self.assertEqual(sched.weight(self.a, 3, 1, state), 2)
        self.assertEqual(sched.weight(self.a, 2, 1, state), 1)

    def test_hybrid_uses_deadlines_in_hi(self):
        state = _state(self.s, 1)
        state.remaining[self.a.key] = 2
        sched = schedulers.HybridScheduler()
        self.assertEqual(sched.weight(self.a, 3, 1, state), 4)
        self.assertEqual(sched.weight(self.a, 0, 1, state), 4)

    def test_rank_orders_by_weight(self):
        state = _state(self.s, 0)
        state.remaining[self.a.key] = 1
        state.remaining[self.b.key] = 2
        ranked = schedulers.LaxityScheduler().rank([self.b, self.a], 1, 0, state)
        self.assertEqual(ranked, [self.a, self.b])
        self.assertEqual(state.weights[self.a], 0)
        self.assertEqual(state.weights[self.b], 1)
        self.assertFalse(state.delayed[self.a])


class PromotionTest(unittest.TestCase):
    """ A must catch up in LO with the execution the HI table
    already reserved for it """

    def setUp(self):
        self.s = model.System(cores=1, levels=2)
        d0 = self.s.bind_dag(model.McDag(0, period=4))
        self.x = d0.bind_actor(model.Actor("X", [2]))
        d1 = self.s.bind_dag(model.McDag(1, period=4))
        self.a = d1.bind_actor(model.Actor("A", [1, 3]))

        self.table = analysis.SchedulingTable(2, 4, 1)
        for slot in (1, 2, 3):
            self.table.assign(1, slot, 0, "A")

        self.state = _state(self.s, 0, self.table)
        self.state.remaining[self.a.key] = 1
        self.state.remaining[self.x.key] = 1

    def test_no_promotion_before_hi_execution(self):
        sched = schedulers.LaxityScheduler()
        self.assertFalse(sched.needs_promotion(self.a, 0, 0, self.state))
        self.assertEqual(sched.weight(self.a, 0, 0, self.state), 3)

    def test_promotion(self):
        for sched in (schedulers.LaxityScheduler(), schedulers.HybridScheduler()):
            self.assertTrue(sched.needs_promotion(self.a, 1, 0, self.state))
            self.assertEqual(sched.weight(self.a, 1, 0, self.state), 0)

    def test_no_promotion_once_executed(self):
        self.state.remaining[self.a.key] = 0
        sched = schedulers.LaxityScheduler()
        self.assertFalse(sched.needs_promotion(self.a, 1, 0, self.state))

    def test_chain_promotion_slot(self):
        # A -> B with the HI table of A at slots 2 and 3
        s = model.System(cores=1, levels=2)
        d = s.bind_dag(model.McDag(0, period=4))
        a = d.bind_actor(model.Actor("A", [1, 2]))
        b = d.bind_actor(model.Actor("B", [2]))
        d.link(a, b)
        table = analysis.SchedulingTable(2, 4, 1)
        table.assign(1, 2, 0, "A")
        table.assign(1, 3, 0, "A")
        state = _state(s, 0, table)
        state.remaining[a.key] = 1

        sched = schedulers.LaxityScheduler()
        self.assertEqual(sched.weight(a, 0, 0, state), 1)
        self.assertFalse(sched.needs_promotion(a, 1, 0, state))
        self.assertEqual(sched.weight(a, 2, 0, state), 0)

    def test_lo_only_actor_is_never_promoted(self):
        sched = schedulers.LaxityScheduler()
        self.assertFalse(sched.needs_promotion(self.x, 1, 0, self.state))


class DelayTest(unittest.TestCase):
    """ X runs 1, 2 and 3 slots in the three levels """

    def setUp(self):
        self.s = model.System(cores=1, levels=3)
        d = self.s.bind_dag(model.McDag(0, period=4))
        self.x = d.bind_actor(model.Actor("X", [1, 2, 3]))

        self.table = analysis.SchedulingTable(3, 4, 1)
        for slot in (1, 2, 3):
            self.table.assign(2, slot, 0, "X")
        self.state = _state(self.s, 1, self.table)

    def test_waits_for_the_extra_execution_time(self):
        self.state.remaining[self.x.key] = 2
        sched = schedulers.LaxityScheduler()
        # nothing of level 2 is covered at the end of the instance
        self.assertTrue(sched.must_wait(self.x, 3, 1, self.state))
        self.assertEqual(sched.weight(self.x, 3, 1, self.state), schedulers.MAX_WEIGHT)
        self.assertFalse(sched.must_wait(self.x, 2, 1, self.state))

    def test_waits_after_partial_execution(self):
        self.state.remaining[self.x.key] = 1
        sched = schedulers.HybridScheduler()
        self.assertTrue(sched.must_wait(self.x, 1, 1, self.state))
        self.assertFalse(sched.must_wait(self.x, 0, 1, self.state))
        self.assertEqual(sched.weight(self.x, 0, 1, self.state), 4)

    def test_top_level_never_waits(self):
        state = _state(self.s, 2, self.table)
        state.remaining[self.x.key] = 3
        self.assertFalse(schedulers.LaxityScheduler().must_wait(self.x, 3, 2, state))

    def test_is_delayed(self):
        self.state.remaining[self.x.key] = 2
        sched = schedulers.LaxityScheduler()
        sched.rank([self.x], 3, 1, self.state)
        self.assertTrue(sched.is_delayed(self.x, 3, 1, self.state))


def test_get_scheduler():
    assert isinstance(schedulers.get_scheduler('laxity'), schedulers.LaxityScheduler)
    assert isinstance(schedulers.get_scheduler('hybrid'), schedulers.HybridScheduler)
    assert repr(schedulers.get_scheduler('hybrid')) == 'hybrid'


def test_get_scheduler_from_options():
    old = options.get_opt('scheduler')
    try:
        options.set_opt('scheduler', 'hybrid')
        assert isinstance(schedulers.get_scheduler(), schedulers.HybridScheduler)
    finally:
        options.set_opt('scheduler', old)


def test_unknown_scheduler():
    with pytest.raises(ValueError):
        schedulers.get_scheduler('edf')


def test_base_scheduler_has_no_weight():
    s = model.System(cores=1, levels=1)
    d = s.bind_dag(model.McDag(0, period=2))
    a = d.bind_actor(model.Actor("A", [1]))
    with pytest.raises(NotImplementedError):
        schedulers.Scheduler().weight(a, 0, 0, _state(s, 0))


if __name__ == "__main__":
    unittest.main()
