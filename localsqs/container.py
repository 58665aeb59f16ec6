"""
LocalStack container lifecycle: start the container, wait until SQS is available, hand out an SQS service, tear it all down.
"""

from dataclasses import replace
from threading import Event
from typing import Any, Callable, Union

from balsa import get_logger
from docker.errors import DockerException
from testcontainers.core.container import DockerContainer
from typeguard import typechecked

from localsqs.__version__ import __application_name__
from localsqs.exceptions import LocalSQSException, LocalStackInitializationException, DockerNotAvailable, OperationCancelled
from localsqs.mock import is_using_localstack, get_localstack_endpoint
from localsqs.readiness import localstack_health_endpoint, wait_until_ready
from localsqs.settings import LocalStackSettings, localstack_port
from localsqs.sqs import SQSService

log = get_logger(__application_name__)

docker_error_indicators = [
    "docker",
    "daemon",
    "npipe://./pipe/docker_engine",
    "port is already allocated",
    "failed to set up container networking",
]


def is_docker_related_error(e: BaseException) -> bool:
    """
    Does this exception look like Docker isn't available (as opposed to localstack itself having a problem)?
    """
    if isinstance(e, LocalSQSException):
        return False  # raised by us, e.g. a readiness timeout whose URL host is "docker"
    if isinstance(e, DockerException) or "docker" in type(e).__name__.lower():
        return True
    message = str(e).lower()
    return any(indicator in message for indicator in docker_error_indicators)


class LocalStackContainer:
    """
    LocalStack in a Docker container (or an already running localstack if LOCALSQS_USE_LOCALSTACK is set).

    with LocalStackContainer() as localstack:
        queue_url = localstack.sqs_service.create_queue("my-queue")
    """

    @typechecked()
    def __init__(self, settings: Union[LocalStackSettings, None] = None, container_factory: Callable[[str], Any] = DockerContainer, cancel: Union[Event, None] = None):
        """
        :param settings: localstack settings
        :param container_factory: makes the (not yet started) container from the image name
        :param cancel: set this event to abandon waiting for localstack to become ready
        """
        # copy - start() writes the mapped host and port into it
        self.settings = LocalStackSettings() if settings is None else replace(settings, environment_variables=dict(settings.environment_variables), services=list(settings.services))
        if not self.settings.is_valid():
            raise ValueError(f"invalid localstack settings : {self.settings}")
        self.container_factory = container_factory
        self.cancel = cancel
        self._container = None  # type: Any
        self._sqs_service = None  # type: Union[SQSService, None]
        self._endpoint_url = None  # type: Union[str, None]

    @property
    def endpoint_url(self) -> str:
        if self._endpoint_url is None:
            return self.settings.get_endpoint_url()
        return self._endpoint_url

    @property
    def sqs_service(self) -> SQSService:
        if self._sqs_service is None:
            raise RuntimeError("localstack is not started - call start() first")
        return self._sqs_service

    @property
    def is_running(self) -> bool:
        if self._container is None:
            # an externally managed localstack is "running" once we've connected to it
            return self._sqs_service is not None
        try:
            wrapped = self._container.get_wrapped_container()
            wrapped.reload()
            running = wrapped.status == "running"
        except DockerException as e:
            log.info(f"could not get container status : {e}")
            running = False
        return running

    def start(self) -> "LocalStackContainer":
        """
        Start localstack, wait for SQS to be available, and configure the SQS service. Does nothing if already started.
        """
        if self._container is not None or self._sqs_service is not None:
            log.info(f"localstack already started at {self.endpoint_url}")
            return self
        try:
            if is_using_localstack():
                self._endpoint_url = get_localstack_endpoint()
                log.info(f"using existing localstack at {self._endpoint_url}")
            else:
                self._start_container()
            wait_until_ready(
                localstack_health_endpoint(self.endpoint_url, "sqs"),
                timeout=self.settings.startup_timeout,
                poll_interval=self.settings.poll_interval,
                cancel=self.cancel,
            )
            self._sqs_service = SQSService(endpoint_url=self.endpoint_url, region_name=self.settings.region)
            log.info(f"localstack ready at {self.endpoint_url}")
        except OperationCancelled:
            log.info("localstack start cancelled")
            self.stop()
            raise
        except Exception as e:
            log.warning(f"could not start localstack : {e}")
            self.stop()
            if is_docker_related_error(e):
                raise DockerNotAvailable("Docker is not available or not running - please make sure Docker is installed and running") from e
            raise LocalStackInitializationException(f"could not start localstack : {e}") from e
        return self

    def _start_container(self):
        container = self.container_factory(self.settings.image).with_exposed_ports(localstack_port).with_env("SERVICES", self.settings.get_services_string())
        for key, value in self.settings.environment_variables.items():
            container = container.with_env(key, value)
        self._container = container
        log.info(f"starting {self.settings.image}")
        container.start()
        self.settings.host = container.get_container_host_ip()
        self.settings.port = int(container.get_exposed_port(localstack_port))
        self._endpoint_url = self.settings.get_endpoint_url()
        log.info(f"localstack container started : {self._endpoint_url}")

    def stop(self):
        """
        Stop and remove the container (if we started one). Never raises.
        """
        if self._sqs_service is not None:
            self._sqs_service.close()
            self._sqs_service = None
        if self._container is not None:
            try:
                self._container.stop()
                log.info("localstack container stopped")
            except Exception as e:
                log.warning(f"could not stop localstack container : {e}")
            self._container = None

    def __enter__(self) -> "LocalStackContainer":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
