"""
Retry with exponential backoff, and the cancellable pause that the readiness polling shares.
"""

import time
from dataclasses import dataclass
from itertools import count
from logging import getLogger
from threading import Event
from typing import Callable, Iterator, TypeVar, Union

from typeguard import typechecked

from localsqs.__version__ import __application_name__
from localsqs.exceptions import RetriesExhausted, OperationCancelled

log = getLogger(__application_name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    How many times to try, and how long to wait in between (seconds).
    """

    max_attempts: int = 3
    initial_delay: float = 0.1
    max_delay: float = 5.0
    backoff_multiplier: float = 2.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"{self.max_attempts=} must be at least 1")
        if self.initial_delay < 0.0:
            raise ValueError(f"{self.initial_delay=} can not be negative")
        if self.initial_delay > self.max_delay:
            raise ValueError(f"{self.initial_delay=} can not be greater than {self.max_delay=}")
        if self.backoff_multiplier < 1.0:
            raise ValueError(f"{self.backoff_multiplier=} must be at least 1.0")


def backoff_delay(policy: RetryPolicy, attempt: int) -> float:
    """
    Delay after attempt number `attempt` (1 based), i.e. before attempt + 1.

    :param policy: retry policy
    :param attempt: attempt number just made
    :return: delay in seconds
    """
    if attempt < 1:
        raise ValueError(f"{attempt=} must be at least 1")
    # once capped, stay capped (and don't overflow the float for large attempt numbers)
    delay = policy.initial_delay
    for _ in range(attempt - 1):
        delay *= policy.backoff_multiplier
        if delay >= policy.max_delay:
            return policy.max_delay
    return min(delay, policy.max_delay)


def backoff_delays(policy: RetryPolicy) -> Iterator[float]:
    """
    Endless sequence of delays: after attempt 1, after attempt 2, ...
    """
    delay = min(policy.initial_delay, policy.max_delay)
    for _ in count():
        yield delay
        delay = min(delay * policy.backoff_multiplier, policy.max_delay)


def pause(seconds: float, cancel: Union[Event, None] = None, sleep: Union[Callable[[float], None], None] = None) -> bool:
    """
    Wait, waking early if cancelled.

    :param seconds: time to wait
    :param cancel: cancel signal
    :param sleep: sleep function (for tests), otherwise time.sleep or the cancel event's wait()
    :return: True if cancellation was requested
    """
    seconds = max(seconds, 0.0)
    if sleep is not None:
        sleep(seconds)
    elif cancel is not None:
        return cancel.wait(seconds)
    else:
        time.sleep(seconds)
    return cancel is not None and cancel.is_set()


@typechecked()
def retry(
    operation: Callable[[], T], policy: Union[RetryPolicy, None] = None, cancel: Union[Event, None] = None, sleep: Union[Callable[[float], None], None] = None
) -> T:
    """
    Call operation until it succeeds, backing off exponentially between attempts.

    :param operation: zero argument callable
    :param policy: retry policy (default RetryPolicy())
    :param cancel: set this event to stop retrying (checked before every attempt and every delay)
    :param sleep: sleep function (for tests)
    :return: whatever operation returns
    """
    if policy is None:
        policy = RetryPolicy()
    attempts = 0
    delays = backoff_delays(policy)
    while True:
        if cancel is not None and cancel.is_set():
            raise OperationCancelled(attempts)
        attempts += 1
        try:
            return operation()
        except Exception as e:
            if attempts >= policy.max_attempts:
                log.warning(f"giving up : {attempts=},{e}")
                raise RetriesExhausted(attempts, e) from e
            delay = next(delays)
            log.info(f"{attempts=} failed, retrying in {delay:.3f}s : {e}")
        if cancel is not None and cancel.is_set():
            raise OperationCancelled(attempts)
        if pause(delay, cancel, sleep):
            raise OperationCancelled(attempts)
