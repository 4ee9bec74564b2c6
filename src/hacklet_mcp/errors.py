"""Exception hierarchy for the dongle driver."""


class DongleError(Exception):
    """Base exception for dongle errors."""
    pass


class SessionNotOpen(DongleError):
    """An operation was invoked outside an open session."""

    def __init__(self, message: str = "Must be executed within an open session"):
        super().__init__(message)


class SessionAlreadyOpen(DongleError):
    """open_session was called on a dongle that already has a session."""

    def __init__(self, message: str = "A session is already open on this dongle"):
        super().__init__(message)


class TransportFailure(DongleError):
    """The byte stream failed to write or to deliver the requested bytes."""
    pass


class DecodeFailure(DongleError):
    """Received bytes do not match the expected response layout."""
    pass
