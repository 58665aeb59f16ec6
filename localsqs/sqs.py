"""
SQS queue management - create, list and delete queues.

SQSService talks to SQS (localstack, moto or real AWS) through boto3. InMemorySQSService is a fake with the same interface for unit tests.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Union

from botocore.exceptions import ClientError, BotoCoreError
from typeguard import typechecked
from balsa import get_logger

from localsqs.__version__ import __application_name__
from localsqs.aws import AWSAccess, boto_error_to_string
from localsqs.exceptions import SQSServiceException, QueueNotFound
from localsqs.naming import extract_queue_name_from_url, is_valid_queue_name
from localsqs.settings import QueueConfiguration

log = get_logger(__application_name__)

queue_not_found_error_codes = {"AWS.SimpleQueueService.NonExistentQueue", "QueueDoesNotExist"}


class SQSServiceBase(ABC):
    """
    Queue management operations. Pick an implementation at construction time.
    """

    @abstractmethod
    def create_queue(self, queue_name: str, attributes: Union[Dict[str, str], None] = None, tags: Union[Dict[str, str], None] = None) -> str:
        """
        create SQS queue

        :param queue_name: queue name
        :param attributes: queue attributes (e.g. VisibilityTimeout)
        :param tags: queue tags
        :return: queue URL
        """
        raise NotImplementedError

    @abstractmethod
    def list_queues(self, prefix: Union[str, None] = None) -> List[str]:
        """
        list queues

        :param prefix: only queues whose name starts with this
        :return: queue URLs
        """
        raise NotImplementedError

    @abstractmethod
    def delete_queue(self, queue_url: str):
        """
        delete queue

        :param queue_url: queue URL
        """
        raise NotImplementedError

    @abstractmethod
    def get_queue_url(self, queue_name: str) -> str:
        raise NotImplementedError

    def create_queue_from_configuration(self, configuration: QueueConfiguration) -> str:
        if not configuration.is_valid():
            raise ValueError(f"invalid queue configuration : {configuration}")
        return self.create_queue(configuration.queue_name, configuration.attributes, configuration.tags)

    def queue_exists(self, queue_url: str) -> bool:
        """
        test if SQS queue exists

        :return: True if exists
        """
        if len(queue_url.strip()) == 0:
            raise ValueError("queue URL can not be empty")
        return queue_url in self.list_queues()

    def close(self):
        pass


class SQSService(AWSAccess, SQSServiceBase):
    @typechecked()
    def __init__(self, **kwargs):
        """
        SQS queue management via boto3

        :param kwargs: kwargs to send to base class (e.g. endpoint_url, region_name, profile_name)
        """
        super().__init__(resource_name="sqs", **kwargs)

    def _service_exception(self, operation: str, e: Exception, queue_name: Union[str, None] = None, target: Union[str, None] = None) -> SQSServiceException:
        self.most_recent_error = boto_error_to_string(e)
        if target is None:
            target = queue_name
        message = f"{operation} failed" if target is None else f"{operation} failed for '{target}'"
        message = f"{message} : {e}"
        log.warning(message)
        if self.most_recent_error in queue_not_found_error_codes:
            return QueueNotFound(message, operation, queue_name)
        return SQSServiceException(message, operation, queue_name)

    @typechecked()
    def create_queue(self, queue_name: str, attributes: Union[Dict[str, str], None] = None, tags: Union[Dict[str, str], None] = None) -> str:
        if len(queue_name.strip()) == 0:
            raise ValueError("queue name can not be empty")
        attributes = {} if attributes is None else attributes
        log.info(f"creating queue {queue_name} with {len(attributes)} attributes")
        kwargs = {"QueueName": queue_name, "Attributes": attributes}
        if tags is not None and len(tags) > 0:
            kwargs["tags"] = tags
        try:
            queue_url = self.client.create_queue(**kwargs)["QueueUrl"]
        except (ClientError, BotoCoreError) as e:
            raise self._service_exception("CreateQueue", e, queue_name) from e
        log.info(f"created queue {queue_name} : {queue_url}")
        return queue_url

    @typechecked()
    def list_queues(self, prefix: Union[str, None] = None) -> List[str]:
        kwargs = {} if prefix is None else {"QueueNamePrefix": prefix}
        queue_urls = []  # type: List[str]
        try:
            for page in self.client.get_paginator("list_queues").paginate(**kwargs):
                queue_urls.extend(page.get("QueueUrls", []))
        except (ClientError, BotoCoreError) as e:
            raise self._service_exception("ListQueues", e) from e
        log.debug(f"listed {len(queue_urls)} queues,{prefix=}")
        return queue_urls

    @typechecked()
    def delete_queue(self, queue_url: str):
        if len(queue_url.strip()) == 0:
            raise ValueError("queue URL can not be empty")
        log.info(f"deleting queue {queue_url}")
        try:
            self.client.delete_queue(QueueUrl=queue_url)
        except (ClientError, BotoCoreError) as e:
            raise self._service_exception("DeleteQueue", e, target=queue_url) from e
        log.info(f"deleted queue {queue_url}")

    @typechecked()
    def get_queue_url(self, queue_name: str) -> str:
        try:
            return self.client.get_queue_url(QueueName=queue_name)["QueueUrl"]
        except (ClientError, BotoCoreError) as e:
            raise self._service_exception("GetQueueUrl", e, queue_name) from e


class InMemorySQSService(SQSServiceBase):
    """
    Fake SQS queue management - no AWS, no localstack. Queue URLs look like localstack's.
    """

    @typechecked()
    def __init__(self, endpoint_url: str = "http://localhost:4566", account_id: str = "000000000000"):
        self.endpoint_url = endpoint_url.rstrip("/")
        self.account_id = account_id
        self.queues = {}  # type: Dict[str, Dict[str, Dict[str, str]]]

    def _queue_url(self, queue_name: str) -> str:
        return f"{self.endpoint_url}/{self.account_id}/{queue_name}"

    @typechecked()
    def create_queue(self, queue_name: str, attributes: Union[Dict[str, str], None] = None, tags: Union[Dict[str, str], None] = None) -> str:
        if len(queue_name.strip()) == 0:
            raise ValueError("queue name can not be empty")
        if not is_valid_queue_name(queue_name):
            raise SQSServiceException(f"CreateQueue failed for '{queue_name}' : invalid queue name", "CreateQueue", queue_name)
        attributes = {} if attributes is None else dict(attributes)
        queue_url = self._queue_url(queue_name)
        if (existing := self.queues.get(queue_url)) is not None:
            # like SQS: creating an existing queue is OK as long as the attributes match
            if existing["attributes"] != attributes:
                raise SQSServiceException(f"CreateQueue failed for '{queue_name}' : queue already exists with different attributes", "CreateQueue", queue_name)
        else:
            self.queues[queue_url] = {"attributes": attributes, "tags": {} if tags is None else dict(tags)}
        log.info(f"created queue {queue_name} : {queue_url}")
        return queue_url

    @typechecked()
    def list_queues(self, prefix: Union[str, None] = None) -> List[str]:
        return [url for url in self.queues if prefix is None or extract_queue_name_from_url(url).startswith(prefix)]

    @typechecked()
    def delete_queue(self, queue_url: str):
        if len(queue_url.strip()) == 0:
            raise ValueError("queue URL can not be empty")
        if self.queues.pop(queue_url, None) is None:
            raise QueueNotFound(f"DeleteQueue failed for '{queue_url}' : queue does not exist", "DeleteQueue")
        log.info(f"deleted queue {queue_url}")

    @typechecked()
    def get_queue_url(self, queue_name: str) -> str:
        if (queue_url := self._queue_url(queue_name)) not in self.queues:
            raise QueueNotFound(f"GetQueueUrl failed for '{queue_name}' : queue does not exist", "GetQueueUrl", queue_name)
        return queue_url
