"""Contract violations raised synchronously at the call site."""


class UsageError(ValueError):
    """Caller misuse: empty address, bad coordinates, missing API key.

    Distinct from a failed lookup, which is returned as a value.
    """
