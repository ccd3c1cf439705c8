"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Tests of the gantt plots
"""

import matplotlib
matplotlib.use('Agg')
from matplotlib import pyplot

from pymcdag import analysis
from pymcdag import model
from pymcdag import plot


def _result():
    s = model.System(cores=1, levels=2)
    d = s.bind_dag(model.McDag(0, period=4))
    a = d.bind_actor(model.Actor("A", [1, 2]))
    b = d.bind_actor(model.Actor("B", [2]))
    d.link(a, b)
    return analysis.build_tables(s, 'laxity')


def test_segments():
    result = _result()
    assert plot.table_segments(result.table, 0, 0) == [('A', 0, 1), ('B', 1, 2)]
    assert plot.table_segments(result.table, 1, 0) == [('A', 2, 2)]


def test_plot_tables(tmp_path):
    out = tmp_path / "tables.png"
    fig = plot.plot_tables(_result(), file_name=str(out))
    assert len(fig.axes) == 2
    assert out.exists()
    pyplot.close(fig)


def test_plot_gantt_with_colors():
    ax = plot.plot_gantt(_result().table, 0, color_map={'A': 'red'})
    assert ax.get_title() == 'level 0'
    pyplot.close(ax.figure)
