#!/usr/bin/env python
# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""Setup script for filtermap distribution. Note that we only
package up the python code. The tests and examples are kept only in the
full source repository.
"""

import os
import sys
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
from filtermap import __version__

from setuptools import setup

DESCRIPTION =\
"""
filtermap is a small (Python3) event stream library built around a single
operator, filter_map, which transforms and filters an event stream in one
pass. The transform function returns either the value to pass downstream or
the FILTERED marker to drop the event. Errors and completion are passed
through unchanged and disconnecting a subscriber releases the upstream
connection.

filtermap is pure Python (3.6 or later) and has no runtime dependencies.
"""

setup(name='filtermap',
      version=__version__,
      description="Fused map and filter operator for event streams",
      long_description=DESCRIPTION,
      license="Apache 2.0",
      author="MPI-SWS and Data-Ken Research",
      author_email="info@thingflow.io",
      packages=['filtermap', 'filtermap.internal', 'filtermap.filters'],
      python_requires='>=3.6',
      classifiers = [
          'Development Status :: 4 - Beta',
          'License :: OSI Approved :: Apache Software License',
          'Programming Language :: Python :: 3',
          'Operating System :: OS Independent',
          'Intended Audience :: Developers' ,
      ],
      keywords = ['events', 'streams', 'reactive', 'filter', 'map'],
)
