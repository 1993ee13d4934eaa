class PreconditionError(ValueError):
    """Raised when a sharing operation is called outside its contract."""


class DuplicateShareError(PreconditionError):
    pass


class InsufficientQuorumError(PreconditionError):
    pass
