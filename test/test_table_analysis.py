"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Tests of the post-analysis of scheduling tables
"""

import unittest

from pymcdag import model
from pymcdag import table_analysis
from pymcdag.analysis import SchedulingTable


class Test(unittest.TestCase):

    def setUp(self):
        self.s = model.System(cores=2, levels=2)
        d = self.s.bind_dag(model.McDag(0, period=4))
        self.x = d.bind_actor(model.Actor("X", [3, 4]))
        self.y = d.bind_actor(model.Actor("Y", [1]))

        # level 0: X runs on core 0, is preempted, and continues on core 1
        self.table = SchedulingTable(2, 4, 2)
        self.table.assign(0, 0, 0, "X")
        self.table.assign(0, 1, 0, "Y")
        self.table.assign(0, 2, 1, "X")
        self.table.assign(0, 3, 0, "X")
        # level 1: X runs without interruption on core 1
        for slot in range(4):
            self.table.assign(1, slot, 1, "X")

    def test_preemptions(self):
        p = table_analysis.count_preemptions(self.table, self.s)
        self.assertEqual(p, {0: {'X': 1, 'Y': 0}, 1: {'X': 0}})

    def test_migrations(self):
        m = table_analysis.count_migrations(self.table, self.s)
        self.assertEqual(m[0]['X'], 1)
        self.assertEqual(m[1]['X'], 0)

    def test_context_switches(self):
        c = table_analysis.count_context_switches(self.table)
        # core 0: X, Y, -, X; core 1: -, -, X, -
        self.assertEqual(c, {0: 4, 1: 1})

    def test_activations(self):
        self.assertEqual(table_analysis.count_activations(self.s, 8), {0: 4, 1: 2})

    def test_statistics(self):
        st = table_analysis.analyze_tables(self.table, self.s)
        self.assertEqual(st.task_preemptions(), {'X': 1, 'Y': 0})
        self.assertEqual(st.total_preemptions(), 1)
        self.assertEqual(st.total_migrations(), 1)
        self.assertEqual(st.total_activations(), 3)
        self.assertIn("preemptions: 1", repr(st))

    def test_completed_actor_is_not_preempted(self):
        table = SchedulingTable(1, 4, 1)
        table.assign(0, 0, 0, "Y")
        s = model.System(cores=1, levels=1)
        d = s.bind_dag(model.McDag(0, period=4))
        d.bind_actor(model.Actor("Y", [1]))
        self.assertEqual(table_analysis.count_preemptions(table, s), {0: {'Y': 0}})


if __name__ == "__main__":
    unittest.main()
