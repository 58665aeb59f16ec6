"""
SQS queue naming: validation, sanitization and unique test queue names.
"""

import re
import time
import random
from itertools import count
from typing import Callable, List, Union
from urllib.parse import urlparse

from typeguard import typechecked

max_queue_name_length = 80  # AWS limit
max_base_name_length = 30  # leave room for the prefix and suffix of unique names
default_base_name = "default"

_invalid_characters_regex = re.compile(r"[^a-zA-Z0-9\-_]")
_hyphen_run_regex = re.compile(r"-+")
_valid_queue_name_regex = re.compile(r"^[a-zA-Z0-9\-_]+$")


@typechecked()
def is_valid_queue_name(queue_name: Union[str, None]) -> bool:
    """
    Test a queue name against the SQS naming rules: 1-80 characters of alphanumerics, hyphens and underscores.
    Names starting or ending with a hyphen or underscore are also rejected.

    :param queue_name: queue name
    :return: True if valid
    """
    if queue_name is None or len(queue_name.strip()) == 0:
        return False
    if len(queue_name) > max_queue_name_length:
        return False
    if queue_name[0] in "-_" or queue_name[-1] in "-_":
        return False
    return _valid_queue_name_regex.match(queue_name) is not None


@typechecked()
def sanitize_queue_name(name: Union[str, None]) -> str:
    """
    Turn an arbitrary string into something usable as part of an SQS queue name.

    :param name: original name
    :return: sanitized name (never empty, at most 30 characters)
    """
    if name is None or len(name.strip()) == 0:
        return default_base_name
    sanitized = _invalid_characters_regex.sub("-", name)
    sanitized = _hyphen_run_regex.sub("-", sanitized).strip("-")
    if len(sanitized) == 0:
        sanitized = default_base_name
    return sanitized[:max_base_name_length]


@typechecked()
def extract_queue_name_from_url(queue_url: str) -> str:
    """
    Get the queue name from a queue URL, e.g. http://localhost:4566/000000000000/my-queue -> my-queue

    :param queue_url: queue URL
    :return: queue name
    """
    if len(queue_url.strip()) == 0:
        raise ValueError("queue URL can not be empty")
    segments = [s for s in urlparse(queue_url).path.split("/") if len(s) > 0]
    if len(segments) < 2:  # account ID and queue name
        raise ValueError(f"invalid queue URL format : {queue_url}")
    return segments[-1]


@typechecked()
def assert_valid_queue_url(queue_url: str, expected_queue_name: Union[str, None] = None):
    """
    Check that a queue URL looks like one handed out by localstack (and optionally that it's for the expected queue).

    :param queue_url: queue URL
    :param expected_queue_name: queue name the URL should refer to
    """
    if len(queue_url.strip()) == 0:
        raise ValueError("queue URL can not be empty")
    parsed = urlparse(queue_url)
    if len(parsed.scheme) == 0 or parsed.hostname is None:
        raise ValueError(f"queue URL is not an absolute URL : {queue_url}")
    host = parsed.hostname
    if host not in ("localhost", "127.0.0.1") and "localstack" not in host and not host.endswith(".localhost"):
        raise ValueError(f"queue URL does not appear to be a localstack URL : {queue_url}")
    if expected_queue_name is not None and (actual_queue_name := extract_queue_name_from_url(queue_url)) != expected_queue_name:
        raise ValueError(f"unexpected queue name in URL : {expected_queue_name=},{actual_queue_name=}")


@typechecked()
def generate_test_queue_names(base_prefix: str, count_of_names: int) -> List[str]:
    """
    Generate a list of test queue names, e.g. "orders" -> ["orders-001", "orders-002", ...]

    :param base_prefix: prefix for all names
    :param count_of_names: number of names
    :return: list of names
    """
    if len(base_prefix.strip()) == 0:
        raise ValueError("base prefix can not be empty")
    if count_of_names <= 0:
        raise ValueError(f"{count_of_names=} must be greater than zero")
    return [f"{base_prefix}-{i:03d}" for i in range(1, count_of_names + 1)]


def _default_instance_id(clock: Callable[[], float]) -> str:
    return f"{int(clock() * 1000)}-{random.randint(1000, 9999)}"


class QueueNameGenerator:
    """
    Generates unique queue names for one test scope. Pass instance_id for deterministic names.
    """

    @typechecked()
    def __init__(self, instance_id: Union[str, None] = None, clock: Union[Callable[[], float], None] = None):
        self.clock = time.time if clock is None else clock
        self.instance_id = _default_instance_id(self.clock) if instance_id is None else sanitize_queue_name(instance_id)
        self._sequence = count(1)

    @typechecked()
    def unique_name(self, base_name: str) -> str:
        """
        Make a unique queue name of the form test-<instance id>-<sanitized base name>-<sequence number>

        :param base_name: base name (sanitized)
        :return: unique queue name
        """
        name = f"test-{self.instance_id}-{sanitize_queue_name(base_name)}-{next(self._sequence)}"
        return name[:max_queue_name_length]
