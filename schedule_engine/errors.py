"""Exception hierarchy for the schedule engine.

Expected outcomes of schedule operations (a rejected candidate, a failed
generation) are returned as OperationResult values. These exceptions mark
the boundaries where that translation happens, plus environment failures
that callers cannot fix by changing the data.
"""


class ScheduleEngineError(Exception):
    """Base exception for all schedule engine errors."""

    pass


class GenerationError(ScheduleEngineError):
    """The external generation service failed to produce a response.

    Examples: timeout, transport failure, empty response. A retry may succeed.
    """

    pass


class ResponseParseError(ScheduleEngineError):
    """The generation response contains no decodable JSON object.

    Retrying the same instruction is not expected to help without caller
    confirmation.
    """

    pass


class ScheduleValidationError(ScheduleEngineError):
    """A schedule document failed validation while being loaded."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("Schedule validation failed:\n" + "\n".join(f"  - {m}" for m in self.messages))


class ClassroomNotFoundError(ScheduleEngineError):
    """The classroom does not exist or is not owned by the acting teacher."""

    pass


class RepositoryError(ScheduleEngineError):
    """A storage backend could not read or write a schedule document."""

    pass
