"""Simulation orchestration.

This module provides the Simulation class, which owns the particle population
and its frame loop, and the Scheduler it uses for deferred tasks.
"""

from levitas.simulation.manager import Simulation
from levitas.simulation.scheduler import ScheduledTask, Scheduler

__all__ = ["ScheduledTask", "Scheduler", "Simulation"]
