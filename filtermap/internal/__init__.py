# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""Internal definitions shared by the core modules. Not part of the public api.
"""

def noop(*args, **kwargs):
    pass
