# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
from filtermap.base import OutputThing, filtermethod
from filtermap.filters.filter_map import FilterMap

@filtermethod(OutputThing, alias="select")
def map(this, mapfun):
    """Pass on mapfun(x) for every event x, including None results.
    """
    return FilterMap(this, mapfun, name="map")
