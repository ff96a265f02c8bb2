"""Background maintenance jobs run inside the API process."""

from src.infrastructure.jobs.retention_sweeper import RetentionSweeper, SweepReport

__all__ = ["RetentionSweeper", "SweepReport"]
