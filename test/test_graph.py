"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Tests of the dot export of systems
"""

from pymcdag import graph
from pymcdag import model
from pymcdag import propagation


def _system():
    s = model.System(cores=1, levels=2)
    d = s.bind_dag(model.McDag(0, period=4, name="control"))
    a = d.bind_actor(model.Actor("A", [1, 2]))
    b = d.bind_actor(model.Actor("B", [2]))
    d.link(a, b)
    return s


def test_actor_label():
    s = _system()
    a = s.get_actor("A")
    assert graph.actor_label(a, 2) == "A C=(1,2)"
    assert graph.actor_label(a, 2, exec_times=False, deadlines=True) == "A D=(-,-)"

    propagation.calculate_deadlines(a.graph, 2)
    assert graph.actor_label(a, 2, exec_times=False, deadlines=True) == "A D=(2,4)"


def test_dot_string():
    g = graph.graph_system(_system())
    dot = g.string()
    assert dot.startswith("strict digraph {")
    assert dot.rstrip().endswith("}")
    assert 'subgraph "cluster_control"' in dot
    assert 'label="control P=4"' in dot
    assert '"A" -> "B"' in dot
    # A executes in the most critical level
    assert 'shape="box"' in dot
    assert 'shape="ellipse"' in dot


def test_dotout(tmp_path):
    out = tmp_path / "system.dot"
    g = graph.graph_system(_system(), dotout=str(out))
    assert out.read_text() == g.string()
