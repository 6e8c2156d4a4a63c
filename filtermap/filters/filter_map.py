# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
Transform and filter each event of a stream in a single pass.

The transform function either returns the value to send downstream or the
special FILTERED marker, in which case nothing is sent for that event::

    from filtermap.filters.filter_map import filter_map, FILTERED

    def double_evens(x):
        return x*2 if x%2==0 else FILTERED

    source.filter_map(double_evens).connect(print)

Since FILTERED is compared by identity, None, 0, False and the like are
regular values and are passed through.
"""
from filtermap.base import OutputThing, XformOrDropFilter, filtermethod, \
                           FILTERED, Filtered

__all__ = ['FILTERED', 'Filtered', 'FilterMap', 'filter_map']


class FilterMap(XformOrDropFilter):
    """Filter that calls mapfun on each event. Results that are FILTERED are
    dropped, all others are dispatched in arrival order. Errors and
    completion from upstream are passed on unchanged.
    """
    def __init__(self, previous_in_chain, mapfun, name=None):
        super().__init__(previous_in_chain)
        self.mapfun = mapfun
        self.name = name

    def _filter(self, x):
        return self.mapfun(x)

    def __str__(self):
        if self.name:
            return self.name
        return 'filter_map(%s)' % getattr(self.mapfun, '__name__',
                                          repr(self.mapfun))


@filtermethod(OutputThing, alias="select_where")
def filter_map(this, mapfun):
    """Returns a stream whose elements are the results of invoking mapfun
    on each element of the source, except for results that are FILTERED.

    Used as a standalone function, filter_map(mapfun) returns an operator that
    can be applied to any number of sources. Each application creates an
    independent FilterMap, which subscribes to that source once something
    connects to it.
    """
    return FilterMap(this, mapfun)
