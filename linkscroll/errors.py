class PreconditionError(RuntimeError):
    """
    Raised when a caller breaks the usage contract (e.g. reading the group
    offset with nothing attached, or releasing a member twice).
    Not meant to be caught and recovered from.
    """
