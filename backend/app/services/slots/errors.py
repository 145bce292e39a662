# backend/app/services/slots/errors.py
"""
Errors raised by the scheduling engine.

All of them are local and recoverable by the caller. "No date within the
horizon" is not an error: the finder returns None.
"""


class SchedulingError(Exception):
    """Base class for scheduling errors."""

    code = "scheduling_error"


class InvalidScheduleConfig(SchedulingError):
    """Field schedule is malformed (bad day names, opening >= closing, ...)."""

    code = "invalid_schedule_config"


class AmbiguousTimeFormat(SchedulingError):
    """A stored time string does not match the expected clock format."""

    code = "ambiguous_time_format"

    def __init__(self, value):
        self.value = value
        super().__init__(f"Cannot parse time {value!r}")


class RecurrenceNotAllowed(SchedulingError):
    """Recurrence pattern is not offered for the field's operating days."""

    code = "recurrence_not_allowed"
