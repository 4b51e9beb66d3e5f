class SessionError(Exception):
    pass


class SessionNotActiveError(SessionError):
    """Session manager used before start() or after close()."""


class MalformedIdentityError(SessionError, ValueError):
    """get-user payload that cannot form an Identity."""
