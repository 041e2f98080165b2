"""Interval scheduling of bump cycles."""

from dodgem.scheduler.cycle_scheduler import CycleScheduler

__all__ = [
    "CycleScheduler",
]
