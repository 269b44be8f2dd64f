"""Domain exceptions. Endpoints translate these to HTTP responses."""


class WorkoutTrackerError(Exception):
    """Base for all application errors."""

    status_code = 500


class RecordStoreError(WorkoutTrackerError):
    """The personal-record store could not be read or written."""

    status_code = 503


class StoreReadFailure(RecordStoreError):
    pass


class StoreWriteFailure(RecordStoreError):
    pass


class NotFoundError(WorkoutTrackerError):
    status_code = 404
    entity = "Resource"

    def __init__(self, entity_id=None):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found")


class SessionNotFound(NotFoundError):
    entity = "Session"


class TemplateNotFound(NotFoundError):
    entity = "Template"


class ExerciseNotFound(NotFoundError):
    entity = "Exercise"


class SetNotFound(NotFoundError):
    entity = "Set"


class SessionAlreadyFinished(WorkoutTrackerError):
    status_code = 409

    def __init__(self, session_id=None):
        self.session_id = session_id
        super().__init__("Session already finished")


class LimitExceeded(WorkoutTrackerError):
    status_code = 400
