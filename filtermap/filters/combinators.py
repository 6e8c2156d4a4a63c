# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
Combinators for building pipelines out of operators, i.e. the functions
returned by calling a @filtermethod name such as ``filter_map(f)``::

    pipeline = compose(filter_map(parse), where(valid), map(normalize))
    pipeline(source).connect(sink)
"""

from filtermap.base import OutputThing, filtermethod, _apply


def compose(*steps):
    """Chain operators into a single operator. The last step may also be an
    InputThing or a plain function, in which case applying the result
    returns None.
    """
    def operator(source):
        for i, step in enumerate(steps):
            assert source is not None, \
                "step %d follows a terminal InputThing" % i
            source = _apply(source, step)
        return source
    operator.__operator__ = True
    return operator


@filtermethod(OutputThing)
def passthrough(this, spur):
    """Attach spur (an operator, pipeline or InputThing) as a side branch
    and continue the chain from this.
    """
    _apply(this, spur)
    return this
