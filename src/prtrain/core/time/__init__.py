from prtrain.core.time.abc import Time
from prtrain.core.time.real import RealTime

__all__ = ["RealTime", "Time"]
