class MarkerError(Exception):
    """A request-level failure. str(err) is shown to the issue author."""

class ClassificationError(MarkerError):
    pass

class InputError(MarkerError):
    pass

class NotFoundError(MarkerError):
    pass

class ConflictError(MarkerError):
    pass

class ConfirmationError(MarkerError):
    pass

class SetupError(Exception):
    """Missing/unreadable event payload, dataset or config. Aborts the run."""
