# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
from filtermap.base import OutputThing, FILTERED, filtermethod
from filtermap.filters.filter_map import FilterMap

@filtermethod(OutputThing, alias="filter")
def where(this, predicate):
    """Filter a stream based on the specified predicate function.
    """
    return FilterMap(this, lambda x: x if predicate(x) else FILTERED,
                     name="where")
