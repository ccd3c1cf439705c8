#!/usr/bin/env python

"""
| Copyright (C) 2018 pyMCDAG contributors
| All rights reserved.
| See LICENSE file for copyright and license details.

Description
-----------

Setup
"""


from setuptools import setup

setup(name='pymcdag',
      version='1.0',
      description='pyMCDAG - scheduling tables for mixed-criticality DAGs on multi-core',
      author='pyMCDAG contributors',
      license="MIT",
      packages=['pymcdag'],
      python_requires='>=3.6',
      install_requires=[],
      extras_require={'plot': ['matplotlib'],
                      'topology_plot': ['pygraphviz'],
                      'test': ['pytest', 'matplotlib']}
     )
