"""Fatal error conditions. Anything recovered locally never becomes one of these."""


class BridgeError(Exception):
    """Base class for conditions that end the bridge process."""


class ResolutionError(BridgeError):
    """The host/port pair could not be resolved to any address."""

    def __init__(self, host: str, port: str, reason: str):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"getaddrinfo {host}:{port}: {reason}")


class AttachExhaustionError(BridgeError):
    """Every resolved candidate failed to bind or connect."""

    def __init__(self, host: str, port: str):
        self.host = host
        self.port = port
        super().__init__(f"failed to attach {host}:{port}")


class FatalWriteError(BridgeError):
    """A write to the upstream connection failed in a way retrying cannot fix."""

    def __init__(self, fileno: int, error: OSError):
        self.fileno = fileno
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(f"writing to fd {fileno}: {reason}")


class FatalReceiveError(BridgeError):
    """The listening socket is no longer usable."""

    def __init__(self, fileno: int, error: OSError):
        self.fileno = fileno
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(f"recv on fd {fileno}: {reason}")
