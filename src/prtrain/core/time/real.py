"""Real time implementation using actual time.sleep()."""

import time

from prtrain.core.time.abc import Time


class RealTime(Time):
    """Production implementation using actual time.sleep()."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
