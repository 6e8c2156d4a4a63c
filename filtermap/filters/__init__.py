# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
Linq-style operators over event streams. The central one is filter_map,
which transforms each event and drops those for which the transform returns
FILTERED; map and where are special cases of it.

Every operator is available as a method on OutputThing::

    source.filter_map(parse).where(lambda x: x > 100).connect(print)

and as a standalone function that returns a reusable operator, which is
applied to a source later (see combinators.py)::

    pipeline = compose(filter_map(parse), where(lambda x: x > 100))
    pipeline(source_a).connect(print)
    pipeline(source_b).connect(print)

Nothing is subscribed upstream until something connects to the end of a
chain.
"""

from . import filter_map
from . import map
from . import where
from . import combinators
