# Application Memorization Package
from .analytics import ProgressCalculator
from .scheduler import MemorizationScheduler

__all__ = ["MemorizationScheduler", "ProgressCalculator"]
