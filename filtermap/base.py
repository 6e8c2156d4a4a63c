# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
Base functionality for filtermap: the event stream contract that operators
plug into.

 * InputThing  - receives events through on_next(), on_error() and
                 on_completed().
 * OutputThing - emits events. connect() returns a function that removes
                 the connection again.
 * Filter      - both an InputThing and an OutputThing. A filter is connected
                 to the previous thing in the chain only while something is
                 connected to the filter itself.
 * FILTERED    - the drop marker. When an XformOrDropFilter's _filter()
                 returns FILTERED, that event is not passed on.
 * Scheduler   - pulls events out of sources on an asyncio event loop.

Each stream ends with at most one on_completed() or on_error(). Data errors
are plain exception objects handed to on_error(). Problems in the plumbing
are FatalErrors and stop the event loop.
"""

from enum import Enum
import logging
logger = logging.getLogger(__name__)

from filtermap.internal import noop


class Filtered(Enum):
    """Type of the FILTERED marker. A transform can be annotated as
    returning ``Union[U, Filtered]``.
    """
    FILTERED = 'FILTERED'

    def __repr__(self):
        return 'FILTERED'

    def __str__(self):
        return 'FILTERED'

# Compare with "is", never with "==".
FILTERED = Filtered.FILTERED


class FatalError(Exception):
    """Base class for errors in the infrastructure rather than in the data
    stream, such as dispatching on a closed stream. These end the event loop.
    """
    pass

class InvalidConnectionError(FatalError):
    pass

class StreamAlreadyClosed(FatalError):
    pass

class ExcInDispatch(FatalError):
    """An input thing raised something other than a FatalError."""
    pass

class ScheduleError(FatalError):
    pass


class InputThing:
    def on_next(self, x):
        pass

    def on_error(self, e):
        pass

    def on_completed(self):
        pass


class CallableAsInputThing(InputThing):
    """Adapt a plain function to the InputThing interface. Without an
    explicit on_error, data errors are logged and fatal ones re-raised.
    """
    def __init__(self, on_next=None, on_error=None, on_completed=None):
        self.on_next = on_next or noop
        self.on_completed = on_completed or noop
        if on_error:
            self.on_error = on_error

    def on_error(self, e):
        if isinstance(e, FatalError):
            raise e
        logger.error("%s: Received on_error(%s)" % (self, e))

    def __str__(self):
        return 'CallableAsInputThing(%s)' % self.on_next


class _Connection:
    # cancelled is set by the disconnect function and checked before every
    # delivery, including terminal ones.
    __slots__ = ('input_thing', 'on_next', 'on_error', 'on_completed',
                 'cancelled')

    def __init__(self, input_thing):
        self.input_thing = input_thing
        self.on_next = input_thing.on_next
        self.on_error = input_thing.on_error
        self.on_completed = input_thing.on_completed
        self.cancelled = False


class OutputThing:
    """Base class for event sources. connect() is the public interface; the
    underscore methods are for subclasses and the scheduler.
    """
    def __init__(self):
        self.__connections__ = []
        self.__closed__ = False

    def connect(self, input_thing):
        """Send this thing's events to input_thing, which may also be a plain
        function (it then only gets on_next calls). Returns a function that
        cancels the connection; calling it again, or after the stream has
        ended, does nothing.
        """
        if self.__closed__:
            raise StreamAlreadyClosed("Cannot connect %s to %s: stream has ended" %
                                      (input_thing, self))
        if not hasattr(input_thing, 'on_next') and callable(input_thing):
            input_thing = CallableAsInputThing(input_thing)
        try:
            connection = _Connection(input_thing)
        except AttributeError as e:
            raise InvalidConnectionError("%r is neither an InputThing nor callable" %
                                         (input_thing,)) from e
        if not self.__connections__:
            self._on_first_connect()
        # Copy on write, so dispatch loops can iterate over the old list.
        self.__connections__ = self.__connections__ + [connection]

        def disconnect():
            if connection.cancelled:
                return
            connection.cancelled = True
            if self.__closed__:
                return
            self.__connections__ = [c for c in self.__connections__
                                    if c is not connection]
            if not self.__connections__:
                self._on_last_disconnect()
        return disconnect

    def _has_connections(self):
        return len(self.__connections__)>0

    def _on_first_connect(self):
        """Hook run before the first connection is added (again)."""
        pass

    def _on_last_disconnect(self):
        """Hook run when a disconnect leaves no connections. Not run when the
        stream ends.
        """
        pass

    def _deliver(self, connections, method, *args):
        for c in connections:
            if c.cancelled:
                continue
            try:
                getattr(c, method)(*args)
            except FatalError:
                raise
            except Exception as e:
                raise ExcInDispatch("%s: %s%r raised in InputThing %s" %
                                    (self, method, args, c.input_thing)) from e

    def _end(self):
        if self.__closed__:
            raise StreamAlreadyClosed("%s already had an on_completed or on_error event" %
                                      self)
        self.__closed__ = True
        connections = self.__connections__
        self.__connections__ = []
        return connections

    def _dispatch_next(self, x):
        if self.__closed__:
            raise StreamAlreadyClosed("%s already had an on_completed or on_error event" %
                                      self)
        self._deliver(self.__connections__, 'on_next', x)

    def _dispatch_completed(self):
        self._deliver(self._end(), 'on_completed')

    def _dispatch_error(self, e):
        self._deliver(self._end(), 'on_error', e)

    def __str__(self):
        return self.__class__.__name__ + '()'


class Filter(OutputThing, InputThing):
    """One input, one output; passes everything through unless overridden.

    The upstream connection exists exactly while the filter has connections
    of its own: the first connect() subscribes to previous_in_chain, and the
    last disconnect releases it. A later connect() subscribes again.
    """
    def __init__(self, previous_in_chain):
        super().__init__()
        self.previous_in_chain = previous_in_chain
        self._upstream = None

    def _on_first_connect(self):
        if self._upstream is None:
            self._upstream = self.previous_in_chain.connect(self)

    def _on_last_disconnect(self):
        self.disconnect_from_upstream()

    def disconnect_from_upstream(self):
        upstream, self._upstream = self._upstream, None
        if upstream is not None:
            upstream()

    def on_next(self, x):
        self._dispatch_next(x)

    def on_error(self, e):
        self._upstream = None
        self._dispatch_error(e)

    def on_completed(self):
        self._upstream = None
        self._dispatch_completed()


class XformOrDropFilter(Filter):
    """Subclasses implement _filter(x). Its result is passed downstream
    unless it is FILTERED; None and other false values are passed on too.

    If _filter() raises anything but a FatalError, the exception is logged,
    sent unchanged to on_error(), and the filter lets go of its upstream.
    """
    def on_next(self, x):
        try:
            x_prime = self._filter(x)
        except FatalError:
            raise
        except Exception as e:
            logger.exception("Got an exception on %s._filter(%s)" % (self, x))
            try:
                self._dispatch_error(e)
            finally:
                self.disconnect_from_upstream()
            return
        if x_prime is not FILTERED:
            self._dispatch_next(x_prime)

    def _filter(self, x):
        return x


class _OperatorBuilder:
    """What the module-level name of a @filtermethod function becomes.
    Calling it with the operator's arguments gives a one-argument function
    from source to filter.
    """
    def __init__(self, func):
        self.func = func
        self.__name__ = func.__name__
        self.__doc__ = func.__doc__

    def __call__(self, *args, **kwargs):
        func = self.func
        def operator(source):
            return func(source, *args, **kwargs)
        operator.__name__ = self.__name__
        operator.__operator__ = True
        return operator

    def __repr__(self):
        return "_OperatorBuilder(%s)" % self.__name__

def _is_operator(step):
    return getattr(step, '__operator__', False)

def _apply(source, step):
    """Apply one pipeline step to source. An operator (or an operator
    builder called without arguments) returns the next thing in the chain;
    anything else is connected as a terminal InputThing and gives None.
    """
    if isinstance(step, _OperatorBuilder):
        step = step()
    if _is_operator(step):
        return step(source)
    source.connect(step)
    return None


def filtermethod(base, alias=None):
    """Decorator for linq-style operators written as ``func(this, ...)``.

    ``func`` becomes a method of base (usually OutputThing), for chaining
    like ``source.filter_map(f)``. In the defining module, the name (and every
    alias) is rebound to an _OperatorBuilder, so ``filter_map(f)`` returns a
    reusable operator that can be applied to a source later.
    """
    if alias is None:
        aliases = []
    elif isinstance(alias, list):
        aliases = alias
    else:
        aliases = [alias]
    def decorate(func):
        builder = _OperatorBuilder(func)
        for name in [func.__name__] + aliases:
            setattr(base, name, func)
            func.__globals__[name] = builder
        return builder
    return decorate


class IterableAsOutputThing(OutputThing):
    """Source that emits the items of an iterable, one per _observe() call,
    then completes. If the iterator raises, the exception goes to on_error.
    """
    def __init__(self, iterable, name=None):
        super().__init__()
        self.iterator = iter(iterable)
        self.name = name

    def _observe(self):
        try:
            x = next(self.iterator)
        except StopIteration:
            self._dispatch_completed()
            return
        except FatalError:
            raise
        except Exception as e:
            logger.exception("Iterator of %s raised" % self)
            self._dispatch_error(e)
            return
        self._dispatch_next(x)

    def __str__(self):
        return self.name or super().__str__()

def from_iterable(i):
    return IterableAsOutputThing(i)

def from_list(l):
    return IterableAsOutputThing(l)


class Scheduler:
    """Runs sources on an asyncio event loop. A scheduled source has its
    _observe() called once per pass through the loop for as long as
    something is connected to it. run_forever() returns once no schedules
    are left.
    """
    def __init__(self, event_loop):
        self.event_loop = event_loop
        self.active_schedules = {} # source -> loop handle
        self.fatal_error = None
        event_loop.set_exception_handler(self._on_loop_exception)

    def _on_loop_exception(self, loop, context):
        self.fatal_error = context.get('exception') or \
                           FatalError(context.get('message'))
        self.stop()

    def _deschedule(self, source):
        self.active_schedules.pop(source).cancel()
        if not self.active_schedules:
            logger.info("No more active schedules, will exit event loop")
            self.stop()

    def schedule_recurring(self, source):
        """Returns a function that cancels the schedule."""
        def step():
            if source not in self.active_schedules:
                return
            if source._has_connections():
                source._observe()
            if source not in self.active_schedules:
                return # cancelled from within _observe()
            if source._has_connections():
                self.active_schedules[source] = self.event_loop.call_soon(step)
            else:
                logger.debug("Nothing connected to %s, descheduling" % source)
                self._deschedule(source)

        def cancel():
            if source not in self.active_schedules:
                raise ScheduleError("%s does not have an active schedule" %
                                    source)
            logger.debug("Canceling schedule of %s" % source)
            self._deschedule(source)

        self.active_schedules[source] = self.event_loop.call_soon(step)
        return cancel

    def run_forever(self):
        self.event_loop.run_forever()
        if self.fatal_error is not None:
            raise ScheduleError("Scheduler aborted due to fatal error") \
                from self.fatal_error

    def stop(self):
        for handle in self.active_schedules.values():
            handle.cancel()
        self.active_schedules = {}
        self.event_loop.stop()
