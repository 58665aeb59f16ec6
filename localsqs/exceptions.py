from typing import Union


class LocalSQSException(Exception):
    """Base exception for localsqs errors."""

    pass


class ReadinessTimeout(LocalSQSException, TimeoutError):
    """Raised when a service did not report itself ready within the allotted time."""

    def __init__(self, elapsed: float, timeout: float, url: Union[str, None] = None):
        self.elapsed = elapsed
        self.timeout = timeout
        self.url = url
        target = "" if url is None else f" ({url})"
        super().__init__(f"not ready{target} after {elapsed:.3f}s (timeout={timeout}s)")


class RetriesExhausted(LocalSQSException):
    """Raised when every attempt of a retried operation failed. The last failure is the __cause__."""

    def __init__(self, attempts: int, last_exception: BaseException):
        self.attempts = attempts
        self.last_exception = last_exception
        super().__init__(f"operation failed after {attempts} attempts : {last_exception}")


class OperationCancelled(LocalSQSException):
    """Raised when the caller requested cancellation. Not a timeout and not exhaustion."""

    def __init__(self, attempts: int = 0):
        self.attempts = attempts
        super().__init__(f"cancelled after {attempts} attempts")


class SQSServiceException(LocalSQSException):
    """Raised when an SQS operation fails."""

    def __init__(self, message: str, operation: Union[str, None] = None, queue_name: Union[str, None] = None):
        self.operation = operation
        self.queue_name = queue_name
        super().__init__(message)


class QueueNotFound(SQSServiceException):
    """Raised when the queue an operation refers to does not exist."""

    pass


class LocalStackInitializationException(LocalSQSException):
    """Raised when the LocalStack container could not be brought up."""

    pass


class DockerNotAvailable(LocalStackInitializationException):
    """Raised when Docker itself is not available (not installed, not running, port conflicts, etc.)."""

    pass
