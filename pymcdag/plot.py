"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Gantt plotting of scheduling tables (requires matplotlib)
"""

from matplotlib import pyplot
from matplotlib import ticker


def table_segments(table, level, core):
    """ Returns the contiguous executions on core in level
    as a list of (name, start, length) """
    segments = list()
    current = None
    start = 0
    for slot, name in enumerate(table.core_row(level, core) + [None]):
        if name != current:
            if current is not None:
                segments.append((current, start, slot - start))
            current = name
            start = slot
    return segments


def plot_gantt(table, level, ax=None, file_name=None, show=False,
               height=0.8,  # height of the execution bars
               bar_linewidth=1,  # linewidth of execution bars
               annotate_actors=True,  # write the actor name into each bar
               color_execution_bar='lightblue',
               color_map=None):
    """ Plot a gantt chart of the table of one level, one row per core.

    :param table: the finished tables
    :type table: analysis.SchedulingTable
    :param level: criticality level to plot
    :param ax: axes to draw into, a new figure is created if None
    :param color_map: optional dict (actor name -> color)
    :rtype: matplotlib axes
    """
    if ax is None:
        w, h = pyplot.figaspect(0.4)
        fig = pyplot.figure(figsize=(w, h * 0.5))
        ax = fig.add_subplot(111)

    yticks = list()
    for core in range(table.cores):
        ypos = table.cores - 1 - core
        yticks.append(ypos)
        for name, start, length in table_segments(table, level, core):
            color = color_execution_bar
            if color_map is not None:
                color = color_map.get(name, color_execution_bar)
            ax.broken_barh([(start, length)],
                           (ypos - height / 2., height),
                           facecolors=color,
                           edgecolor='black',
                           linewidth=bar_linewidth)
            if annotate_actors:
                ax.text(start + length / 2., ypos, name,
                        horizontalalignment='center',
                        verticalalignment='center')

    ax.set_title('level %d' % level)
    ax.set_xlabel('time slot')
    ax.set_yticks(yticks)
    ax.set_yticklabels(['core %d' % c for c in range(table.cores)])
    ax.set_xlim(0, table.hyperperiod)
    ax.set_ylim(-1, table.cores)
    ax.xaxis.set_major_locator(ticker.MaxNLocator(20, integer=True))
    ax.grid(True)

    if file_name is not None:
        pyplot.savefig(file_name, bbox_inches='tight')

    if show:
        pyplot.show()

    return ax


def plot_tables(result, file_name=None, show=False, **kwargs):
    """ Plot the tables of all levels of a ScheduleResult,
    the most critical level on top """
    table = result.table
    assert table is not None, "no tables to plot: %r" % result.infeasibility

    fig, axes = pyplot.subplots(table.levels, 1, squeeze=False,
                                figsize=(max(6, table.hyperperiod * 0.4),
                                         1.5 * table.levels * table.cores + 1))
    for i, level in enumerate(range(table.levels - 1, -1, -1)):
        plot_gantt(table, level, ax=axes[i][0], **kwargs)
    fig.tight_layout()

    if file_name is not None:
        pyplot.savefig(file_name, bbox_inches='tight')

    if show:
        pyplot.show()

    return fig
