# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""Common utilities for the tests
"""
import asyncio

from filtermap.base import InputThing, FatalError, Scheduler


def make_scheduler(test_case):
    """Scheduler on a new event loop, closed at the end of the test."""
    loop = asyncio.new_event_loop()
    test_case.addCleanup(loop.close)
    return Scheduler(loop)

def run_sources(test_case, *sources):
    scheduler = make_scheduler(test_case)
    for s in sources:
        scheduler.schedule_recurring(s)
    scheduler.run_forever()


class ErrorIterator:
    """Yields the given values, then raises exc instead of StopIteration.
    """
    def __init__(self, values, exc=None):
        self.values = list(values)
        self.exc = exc or Exception("Throwing an exception in ErrorIterator")

    def __iter__(self):
        return self

    def __next__(self):
        if not self.values:
            raise self.exc
        return self.values.pop(0)


class CountingIterator:
    """0, 1, 2, ... forever; pulled is the number of values taken so far.
    """
    def __init__(self):
        self.pulled = 0

    def __iter__(self):
        return self

    def __next__(self):
        self.pulled += 1
        return self.pulled - 1


class ValidationInputThing(InputThing):
    """Asserts, through test_case, that the events equal expected_stream.
    completed is only set if the whole stream was seen.
    """
    def __init__(self, expected_stream, test_case):
        self.expected_stream = expected_stream
        self.test_case = test_case
        self.seen = []
        self.completed = False

    def on_next(self, x):
        self.test_case.assertLess(len(self.seen), len(self.expected_stream),
                                  "Event %r after the end of the expected stream" % (x,))
        self.test_case.assertEqual(self.expected_stream[len(self.seen)], x,
                                   "Element %d of event stream mismatch" % len(self.seen))
        self.seen.append(x)

    def on_completed(self):
        self.test_case.assertEqual(self.expected_stream, self.seen,
                                   "Got on_completed() before end of stream")
        self.completed = True

    def on_error(self, e):
        self.test_case.fail("Unexpected on_error(%s)" % e)


class CaptureInputThing(InputThing):
    """Records every notification. on_error is a FatalError unless
    expecting_error is set.
    """
    def __init__(self, expecting_error=False):
        self.expecting_error = expecting_error
        self.events = []
        self.completed = False
        self.errored = False
        self.error = None
        self.notifications = 0

    def on_next(self, x):
        self.notifications += 1
        self.events.append(x)

    def on_completed(self):
        self.notifications += 1
        self.completed = True

    def on_error(self, e):
        self.notifications += 1
        if not self.expecting_error:
            raise FatalError("Should not get on_error, got on_error(%s)" % e)
        self.errored = True
        self.error = e


class DisconnectAfterN(CaptureInputThing):
    """Connects to prev_in_chain and disconnects itself after N events.
    """
    def __init__(self, prev_in_chain, N):
        super().__init__(expecting_error=True)
        self.N = N
        self.disconnect = prev_in_chain.connect(self)

    def on_next(self, x):
        super().on_next(x)
        if len(self.events)==self.N:
            self.disconnect()
