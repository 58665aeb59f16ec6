import pytest

from localsqs import LocalStackContainer, SQSTestScope, assert_valid_queue_url

from test_localsqs import docker_available

pytestmark = pytest.mark.skipif(not docker_available(), reason="Docker not available")


@pytest.fixture(scope="module")
def localstack():
    with LocalStackContainer() as _localstack:
        yield _localstack


def test_localstack_container_running(localstack):
    assert localstack.is_running
    assert localstack.endpoint_url.startswith("http://")
    assert localstack.sqs_service.list_queues() is not None


def test_localstack_queue_operations(localstack):
    with SQSTestScope(localstack.sqs_service) as scope:
        queue_url = scope.create_test_queue("localstack")
        assert_valid_queue_url(queue_url)
        assert scope.verify_queue_exists(queue_url)
        created = scope.created_queues
    for queue_url in created:
        assert not localstack.sqs_service.queue_exists(queue_url)
