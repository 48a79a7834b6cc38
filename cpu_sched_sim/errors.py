"""
Exceptions raised at the workload boundary.

The algorithms themselves never raise for valid input; a run that hits the
safety time limit is reported through ``ScheduleResult.completed`` instead.
"""


class SchedulerError(Exception):
    """Base class for simulator errors."""


class WorkloadError(SchedulerError, ValueError):
    """A workload entry or file is invalid."""


class EmptyWorkloadError(WorkloadError):
    def __init__(self, message: str = "No processes available. Add processes first.") -> None:
        super().__init__(message)


class CapacityError(WorkloadError):
    pass
