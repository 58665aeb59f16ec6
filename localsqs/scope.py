"""
Per-test helpers: create uniquely named queues that are cleaned up when the test is done.
"""

from logging import getLogger
from typing import Dict, Iterable, List, Tuple, Union

from typeguard import typechecked

from localsqs.__version__ import __application_name__
from localsqs.naming import QueueNameGenerator
from localsqs.readiness import wait_for_condition
from localsqs.sqs import SQSServiceBase
from localsqs.tracker import ResourceTracker

log = getLogger(__application_name__)


class SQSTestScope:
    @typechecked()
    def __init__(self, sqs_service: SQSServiceBase, name_generator: Union[QueueNameGenerator, None] = None, tracker: Union[ResourceTracker, None] = None):
        """
        Queues for one test. Every queue created here is deleted by close() (or on leaving the with block).

        :param sqs_service: SQS service (real or in-memory)
        :param name_generator: unique queue name generator - pass one with a fixed instance_id for deterministic names
        :param tracker: tracks the created queue URLs
        """
        self.sqs_service = sqs_service
        self.name_generator = QueueNameGenerator() if name_generator is None else name_generator
        self.tracker = ResourceTracker() if tracker is None else tracker

    @typechecked()
    def create_test_queue(self, base_name: str, attributes: Union[Dict[str, str], None] = None) -> str:
        """
        Create a queue with a unique name derived from base_name.

        :param base_name: base name
        :param attributes: queue attributes
        :return: queue URL
        """
        if len(base_name.strip()) == 0:
            raise ValueError("base name can not be empty")
        queue_url = self.sqs_service.create_queue(self.name_generator.unique_name(base_name), attributes)
        self.tracker.track(queue_url)
        return queue_url

    @typechecked()
    def create_test_queues(self, base_names: Iterable[str]) -> Dict[str, str]:
        return {base_name: self.create_test_queue(base_name) for base_name in base_names}

    @typechecked()
    def verify_queue_exists(self, queue_url: str) -> bool:
        return self.sqs_service.queue_exists(queue_url)

    @typechecked()
    def verify_queues_exist(self, queue_urls: Iterable[str]) -> Dict[str, bool]:
        all_queues = set(self.sqs_service.list_queues())  # one list call for all of them
        return {queue_url: queue_url in all_queues for queue_url in queue_urls}

    @typechecked()
    def delete_test_queue(self, queue_url: str):
        if len(queue_url.strip()) == 0:
            raise ValueError("queue URL can not be empty")
        self.sqs_service.delete_queue(queue_url)
        self.tracker.untrack(queue_url)

    @property
    def created_queues(self) -> Tuple[str, ...]:
        return self.tracker.tracked

    @typechecked()
    def wait_for_sqs_ready(self, timeout: float = 30.0) -> int:
        """
        Wait until SQS answers a list queues request.

        :param timeout: seconds to wait
        :return: number of checks made
        """

        def sqs_responds() -> bool:
            self.sqs_service.list_queues()
            return True

        return wait_for_condition(sqs_responds, timeout)

    def close(self) -> List[str]:
        """
        Delete all the queues this scope created. Never raises.

        :return: queue URLs that could not be deleted
        """
        abandoned = self.tracker.drain_all(self.sqs_service.delete_queue)
        log.debug(f"test scope closed,{abandoned=}")
        return abandoned

    def __enter__(self) -> "SQSTestScope":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
