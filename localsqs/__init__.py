from .__version__ import __application_name__, __version__, __author__, __title__
from .mock import use_moto_mock_env_var, is_mock, use_localstack_env_var, is_using_localstack, localstack_endpoint_env_var
from .exceptions import LocalSQSException, ReadinessTimeout, RetriesExhausted, OperationCancelled, SQSServiceException, QueueNotFound
from .exceptions import LocalStackInitializationException, DockerNotAvailable
from .aws import AWSAccess, boto_error_to_string
from .settings import LocalStackSettings, QueueConfiguration
from .naming import QueueNameGenerator, sanitize_queue_name, is_valid_queue_name, extract_queue_name_from_url, generate_test_queue_names, assert_valid_queue_url
from .retry import RetryPolicy, retry, backoff_delay, backoff_delays
from .readiness import ServiceEndpoint, wait_until_ready, wait_for_condition, localstack_health_endpoint, service_available
from .tracker import ResourceTracker
from .sqs import SQSServiceBase, SQSService, InMemorySQSService
from .container import LocalStackContainer, is_docker_related_error
from .scope import SQSTestScope
