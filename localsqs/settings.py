"""
LocalStack and queue configuration
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, List

from localsqs.naming import is_valid_queue_name, max_queue_name_length

localstack_port = 4566  # localstack's "edge" port inside the container
localstack_health_path = "/_localstack/health"


def _default_environment_variables() -> Dict[str, str]:
    return {"DEBUG": "1", "DATA_DIR": "/tmp/localstack/data"}


@dataclass
class LocalStackSettings:
    """
    Settings for the LocalStack container
    """

    image: str = "localstack/localstack:latest"
    port: int = localstack_port  # host port of the endpoint - updated to the mapped port once the container is started
    services: List[str] = field(default_factory=lambda: ["sqs"])
    startup_timeout: float = timedelta(minutes=2).total_seconds()
    poll_interval: float = 1.0  # seconds between health checks
    environment_variables: Dict[str, str] = field(default_factory=_default_environment_variables)
    region: str = "us-east-1"
    use_http: bool = True
    host: str = "localhost"

    def is_valid(self) -> bool:
        if len(self.image.strip()) == 0:
            return False
        if self.port < 1024 or self.port > 65535:
            return False
        if len(self.services) == 0:
            return False
        if self.startup_timeout <= 0.0 or self.poll_interval <= 0.0:
            return False
        if len(self.region.strip()) == 0:
            return False
        return True

    def get_endpoint_url(self) -> str:
        protocol = "http" if self.use_http else "https"
        return f"{protocol}://{self.host}:{self.port}"

    def get_health_url(self) -> str:
        return f"{self.get_endpoint_url()}{localstack_health_path}"

    def get_services_string(self) -> str:
        """
        services in the form localstack wants for its SERVICES environment variable, e.g. "sqs,sns"
        """
        return ",".join(self.services)


@dataclass
class QueueConfiguration:
    """
    A queue to be created: name, attributes (e.g. VisibilityTimeout) and tags
    """

    queue_name: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    tags: Dict[str, str] = field(default_factory=dict)

    def is_valid(self) -> bool:
        return 0 < len(self.queue_name) <= max_queue_name_length and is_valid_queue_name(self.queue_name)

    @classmethod
    def with_common_attributes(cls, queue_name: str, visibility_timeout: int = 30, message_retention_period: int = 1209600) -> "QueueConfiguration":
        """
        Queue configuration with the attributes tests most often set. Retention default is 14 days (the AWS maximum).
        """
        return cls(queue_name, {"VisibilityTimeout": str(visibility_timeout), "MessageRetentionPeriod": str(message_retention_period)})
