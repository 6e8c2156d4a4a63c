"""
Parse log lines and keep only the warnings and errors, using a single
filter_map step. Lines that do not parse, and lines below WARNING, are
dropped by returning FILTERED.

To run this script::

    python log_level_filter.py LOG_FILE

Each line is expected to look like::

    2017-03-26 12:00:01 WARNING disk almost full
"""

import asyncio
import logging
import sys

from filtermap.base import Scheduler, from_iterable
from filtermap.filters.filter_map import FILTERED
import filtermap.filters.filter_map # load the filter_map method on OutputThing

LEVELS = {'DEBUG': logging.DEBUG, 'INFO': logging.INFO,
          'WARNING': logging.WARNING, 'ERROR': logging.ERROR}

def parse_important(line):
    parts = line.split(None, 3)
    if len(parts)<4 or parts[2] not in LEVELS:
        return FILTERED
    if LEVELS[parts[2]]<logging.WARNING:
        return FILTERED
    return (parts[0] + ' ' + parts[1], parts[2], parts[3].rstrip())


def main(argv=sys.argv[1:]):
    if len(argv)!=1:
        print("%s LOG_FILE" % sys.argv[0])
        return 1
    logging.basicConfig(level=logging.INFO)
    with open(argv[0], 'r') as f:
        lines = from_iterable(f)
        lines.filter_map(parse_important).connect(print)
        scheduler = Scheduler(asyncio.new_event_loop())
        scheduler.schedule_recurring(lines)
        scheduler.run_forever()
    return 0

if __name__ == '__main__':
    sys.exit(main())
