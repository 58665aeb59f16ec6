"""
Readiness polling: wait for a service (e.g. localstack) to report itself operational.
"""

import json
import time
from dataclasses import dataclass
from logging import getLogger
from threading import Event
from typing import Callable, Union

import requests
from typeguard import typechecked

from localsqs.__version__ import __application_name__
from localsqs.exceptions import ReadinessTimeout, OperationCancelled
from localsqs.retry import RetryPolicy, backoff_delays, pause
from localsqs.settings import localstack_health_path

log = getLogger(__application_name__)

request_timeout = 5.0  # seconds for any one health check request
ready_states = ("available", "running")


@dataclass(frozen=True)
class ServiceEndpoint:
    """
    A URL to poll and a predicate on the response body that says the service is ready.
    """

    url: str
    predicate: Callable[[str], bool]


def service_available(service: str) -> Callable[[str], bool]:
    """
    Make a predicate for a localstack health response (e.g. {"services": {"sqs": "available", ...}}).

    :param service: service name, e.g. "sqs"
    :return: predicate on the response body
    """

    def predicate(body: str) -> bool:
        try:
            health = json.loads(body)
        except json.JSONDecodeError:
            # not JSON - fall back to looking for the marker
            return any(f'"{service}": "{state}"' in body for state in ready_states)
        services = health.get("services") if isinstance(health, dict) else None
        return isinstance(services, dict) and services.get(service) in ready_states

    return predicate


def localstack_health_endpoint(endpoint_url: str, service: str = "sqs") -> ServiceEndpoint:
    return ServiceEndpoint(f"{endpoint_url.rstrip('/')}{localstack_health_path}", service_available(service))


@typechecked()
def wait_until_ready(
    endpoint: ServiceEndpoint,
    timeout: float,
    poll_interval: float = 1.0,
    cancel: Union[Event, None] = None,
    session_factory: Callable[[], requests.Session] = requests.Session,
    sleep: Union[Callable[[float], None], None] = None,
) -> int:
    """
    Poll endpoint until its predicate holds. The first poll is immediate.

    :param endpoint: URL and readiness predicate
    :param timeout: seconds to keep trying
    :param poll_interval: seconds between polls
    :param cancel: set this event to stop polling
    :param session_factory: makes the HTTP session used for polling (closed before returning)
    :param sleep: sleep function (for tests)
    :return: number of polls made
    """
    start = time.monotonic()
    polls = 0
    with session_factory() as session:
        while True:
            if cancel is not None and cancel.is_set():
                raise OperationCancelled(polls)
            polls += 1
            try:
                response = session.get(endpoint.url, timeout=request_timeout)
                if response.ok and endpoint.predicate(response.text):
                    log.info(f"ready : {endpoint.url},{polls=}")
                    return polls
                log.debug(f"not ready : {endpoint.url},{polls=},{response.status_code=}")
            except requests.RequestException as e:
                log.debug(f"health check failed : {endpoint.url},{polls=},{e}")

            elapsed = time.monotonic() - start
            if elapsed >= timeout:
                raise ReadinessTimeout(elapsed, timeout, endpoint.url)
            if pause(min(poll_interval, timeout - elapsed), cancel, sleep):
                raise OperationCancelled(polls)


@typechecked()
def wait_for_condition(
    condition: Callable[[], bool],
    timeout: float,
    policy: Union[RetryPolicy, None] = None,
    cancel: Union[Event, None] = None,
    sleep: Union[Callable[[float], None], None] = None,
) -> int:
    """
    Wait for an arbitrary condition, checking less and less often (per policy's backoff). The policy's max_attempts is not used - timeout bounds the wait.

    :param condition: zero argument callable - an exception counts as "not yet"
    :param timeout: seconds to keep trying
    :param policy: delay growth (default 0.1s initial, x1.5, 5s ceiling)
    :param cancel: set this event to stop waiting
    :param sleep: sleep function (for tests)
    :return: number of checks made
    """
    if policy is None:
        policy = RetryPolicy(initial_delay=0.1, max_delay=5.0, backoff_multiplier=1.5)
    start = time.monotonic()
    checks = 0
    delays = backoff_delays(policy)
    while True:
        if cancel is not None and cancel.is_set():
            raise OperationCancelled(checks)
        checks += 1
        try:
            if condition():
                return checks
        except Exception as e:
            log.debug(f"condition check failed : {checks=},{e}")
        elapsed = time.monotonic() - start
        if elapsed >= timeout:
            raise ReadinessTimeout(elapsed, timeout)
        if pause(min(next(delays), timeout - elapsed), cancel, sleep):
            raise OperationCancelled(checks)
