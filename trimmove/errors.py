class TrimmoveError(Exception):
    """Base error for the project."""

class InputValidationError(TrimmoveError):
    """Operator input rejected before anything touches the filesystem."""

class InvalidTimeFormatError(InputValidationError):
    pass

class StartNotBeforeEndError(InputValidationError):
    pass

class NoActiveVideoError(InputValidationError):
    pass
