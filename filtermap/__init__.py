# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
This is the main package for filtermap. Directly within this package you will
find the following module:

 * `base` - the event stream abstractions, the FILTERED drop marker and the
   scheduler that drives event sources.

The rest of the functionality is in sub-packages:

 * `internal` - some internal definitions
 * `filters` - linq-style operators over event streams, most importantly
   `filters.filter_map`, which maps and filters in a single pass.
"""

__version__ = "1.0.0"
