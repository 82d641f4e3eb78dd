"""Clock helpers for Scheduler Lite.

All scheduler times are naive local timestamps.
"""

import datetime
import logging
import os

logger = logging.getLogger(__name__)

TEST_TIME_ENV = "SCHEDULER_TEST_TIME"


class TimeProvider:
    """Provides current local time with test time override support."""

    def now_local(self) -> datetime.datetime:
        """Return the current naive local time.

        Can be overridden for testing via the SCHEDULER_TEST_TIME environment
        variable (ISO 8601, e.g. "2026-01-02T00:00"). An offset in the
        override is converted to local time and dropped.

        Returns:
            Current local time without tzinfo (real clock truncated to the minute)
        """
        test_time = os.environ.get(TEST_TIME_ENV)
        if test_time:
            try:
                from dateutil import parser as date_parser

                dt = date_parser.isoparse(test_time)
                if dt.tzinfo is not None:
                    dt = dt.astimezone().replace(tzinfo=None)
                return dt
            except (ValueError, OverflowError) as e:
                logger.warning("Failed to parse %s=%r: %s", TEST_TIME_ENV, test_time, e)

        return datetime.datetime.now().replace(second=0, microsecond=0)


_time_provider = TimeProvider()


def now_local() -> datetime.datetime:
    """Get current local time (convenience function)."""
    return _time_provider.now_local()
