"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

This module contains methods to plot the DAGs of your system

"""


class dotgraph:
    """ Minimalistic implementation of the pygraphviz API.
    With this, you can write graphs to a file. """

    def __init__(self, **kwargs):
        self.dot_str = 'strict digraph {\n'
        self.dot_str += 'graph' + self._str_attr(kwargs)
        self.dot_str += ';\n'
        self.node_strs = dict()

    def _str_attr(self, attr):
        first = True
        node_str = '['
        for k, v in attr.items():
            if first:
                first = False
            else:
                node_str += ',\n'
            node_str += '{k}=\"{v}\"'.format(k=k, v=v)
        node_str += ']'
        return node_str

    def add_subnode(self, name, **kwargs):
        node_str = '"{name}"'.format(name=name)
        node_str += self._str_attr(kwargs) + ';\n'
        self.node_strs[name] = node_str

    def add_node(self, name, **kwargs):
        self.add_subnode(name, **kwargs)
        self.dot_str += self.node_strs[name]

    def add_subgraph(self, nodes, name, label=None):
        subgraph_str = 'subgraph "{name}"'.format(name=name)
        subgraph_str += '{\n'
        if label is not None:
            subgraph_str += '  label="{label}";\n'.format(label=label)
        for n in nodes:
            subgraph_str += '  ' + self.node_strs[n] + '\n'

        subgraph_str += '}\n'
        self.dot_str += subgraph_str

    def add_edge(self, n1, n2, **kwargs):
        edge_str = '"{n1}" -> "{n2}"'.format(n1=n1, n2=n2)
        edge_str += self._str_attr(kwargs) + ';\n'
        self.dot_str += edge_str

    def write(self, filename):
        with open(filename, 'w') as f:
            f.write(self.string())

    def has_node(self, name):
        return name in self.node_strs

    def layout(self, l):
        pass

    def draw(self, path=None, format=None, prog='dot'):

        import os
        from subprocess import Popen, PIPE

        # try to guess format from extension
        if format is None and path is not None:
            format = os.path.splitext(path)[-1].lower()[1:]

        cmd = [prog, '-T' + format]
        if path is not None:
            cmd += ['-o', path]

        p = Popen(cmd, stdin=PIPE, stdout=PIPE)
        p.communicate(input=self.string().encode())

    def string(self):
        return self.dot_str + '}\n'  # close graph


def actor_label(a, levels, exec_times=True, deadlines=False):
    lab = a.name
    if exec_times:
        lab += ' C=(%s)' % ','.join(str(a.wcet(l)) for l in range(levels))
    if deadlines:
        lab += ' D=(%s)' % ','.join('-' if a.deadline(l) is None else str(a.deadline(l))
                                    for l in range(levels))
    return lab


def graph_system(s, filename=None, layout='dot',
                 exec_times=True,
                 deadlines=False,
                 rankdir='LR',
                 show=False,
                 dotout=None,
                 use_pygraphviz=False
                 ):
    """
    Return a graph of the system

    :param s: the system
    :type s: model.System
    :param filename:  if not None, the graph is plotted to this file
    :param layout: graphviz layout algorithm (default 'dot' works best with hierarchical graphs)
    :param exec_times: Show the WCETs of all levels for each actor
    :param deadlines: Show the local deadlines of all levels for each actor
    :param rankdir: Layout option for graphviz
    :param show: Show plot
    :type show: boolean
    :param dotout: If set, write a dot file to this filename
    :param use_pygraphviz: Use pygraphviz instead of the built-in dot writer
    :rtype: dotgraph or pygraphviz.AGraph
    """

    if use_pygraphviz:
        import pygraphviz
        g = pygraphviz.AGraph(directed='true', compound='true',
                              rankdir=rankdir,
                              remincross='true',
                              ordering='out'
                              )
    else:
        g = dotgraph(directed='true', compound='true',
                     rankdir=rankdir,
                     remincross='true',
                     ordering='out'
                     )

    # first, create all nodes, one cluster per DAG
    for d in s.dags:
        dag_actors = list()
        for a in d.actors:
            lab = actor_label(a, s.levels, exec_times, deadlines)
            # boxes execute in the most critical level
            shape = 'box' if a.is_active(s.levels - 1) and s.levels > 1 else 'ellipse'
            if use_pygraphviz:
                g.add_node(a.name, label=str(lab), shape=shape)
            else:
                g.add_subnode(a.name, label=str(lab), shape=shape)
            dag_actors.append(a.name)

        g.add_subgraph(dag_actors, str("cluster_" + d.name),
                       label='%s P=%d' % (d.name, d.period))

    # now come the connections
    for d in s.dags:
        for e in d.edges:
            g.add_edge(e.src.name, e.dst.name, constraint='True')

    if filename is not None:
        g.draw(filename, prog=layout)

    if show:
        try:
            g.draw(prog='dot', format='xlib')
        except IOError:
            pass

    if dotout is not None:
        g.write(dotout)

    return g

# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4
