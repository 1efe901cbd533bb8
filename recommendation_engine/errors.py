"""Engine error taxonomy."""


class InvalidInputError(ValueError):
    """Raised for malformed or out-of-range arguments.

    Always caller-correctable. The engine performs no I/O, so there is no
    transient failure mode and nothing is ever retried internally.
    """
