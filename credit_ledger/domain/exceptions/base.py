"""Base domain exception."""


class DomainException(Exception):
    """
    Base exception for all ledger domain errors.

    Each error carries a stable machine-readable code alongside the
    human-readable message; the API layer surfaces both.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)
