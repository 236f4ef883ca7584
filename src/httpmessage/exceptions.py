"""
=============================================================================
EXCEPTIONS
=============================================================================

Errors raised by the message layer.

=============================================================================
TWO KINDS OF FAILURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     ERROR TAXONOMY                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   STRUCTURAL (raised)                                               │
    │      Wrong argument type      → TypeError                           │
    │      Invalid argument value   → ValueError                          │
    │      Object in wrong state    → the classes below                   │
    │                                                                      │
    │   OPERATIONAL (reported, never raised)                              │
    │      Directory missing, move failed, permissions ...                │
    │      → strategy.state / operation_error / description               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Structural errors are contract violations by the caller and propagate to
the call site. Upload strategies report filesystem problems as data so a
pipeline can stop cleanly and the caller can inspect what happened.

=============================================================================
"""


class FileAlreadyMovedError(RuntimeError):
    """
    Raised when an uploaded file is moved or read after it was moved.

    The ``moved`` flag of an uploaded file is a one-way latch: once a
    relocation was attempted the file is consumed, whatever the outcome.
    """

    def __init__(self, message: str = "The file is already moved."):
        super().__init__(message)


class QueueLockedError(RuntimeError):
    """Raised when a strategies queue is changed while it is running."""

    def __init__(self, message: str = "Unable during invoking."):
        super().__init__(message)


class UnknownOperationError(LookupError):
    """
    Raised when a strategy reports an error code missing from its table.

    Every code a strategy can fail with must be declared in its
    ``errors`` mapping. Hitting this is a programming error.
    """

    def __init__(self, code: str):
        super().__init__(
            f'Unexpected error "{code}" received. All errors must be '
            f"specified in the errors table of the strategy."
        )
        self.code = code


class UnsupportedProtocolError(ValueError):
    """Raised for HTTP protocol versions outside the 1.x range."""

    def __init__(self, version: str, reason: str = "is not supported"):
        super().__init__(f'The protocol "{version}" {reason}.')
        self.version = version


class HeadersAlreadySentError(RuntimeError):
    """Raised when an emitter is asked to emit a second response."""

    def __init__(self, message: str = "Unable to emit response; headers already sent."):
        super().__init__(message)
