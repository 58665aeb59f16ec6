import pytest

from localsqs import SQSTestScope, InMemorySQSService, QueueNameGenerator, ResourceTracker, QueueNotFound, ReadinessTimeout, SQSServiceException, extract_queue_name_from_url

from test_localsqs import test_localsqs_str


def test_scope_create_and_cleanup(in_memory_sqs_service):
    with SQSTestScope(in_memory_sqs_service, QueueNameGenerator("run1")) as scope:
        queue_url = scope.create_test_queue("orders")
        assert extract_queue_name_from_url(queue_url) == "test-run1-orders-1"
        assert scope.verify_queue_exists(queue_url)
        assert scope.created_queues == (queue_url,)
    assert in_memory_sqs_service.list_queues() == []


def test_scope_unique_names(in_memory_sqs_service):
    scope = SQSTestScope(in_memory_sqs_service)
    first = scope.create_test_queue("orders")
    second = scope.create_test_queue("orders")
    assert first != second
    assert len(scope.created_queues) == 2
    assert scope.close() == []
    assert len(scope.created_queues) == 0


def test_scope_create_test_queues(in_memory_sqs_service):
    scope = SQSTestScope(in_memory_sqs_service, QueueNameGenerator("run2"))
    queue_urls = scope.create_test_queues(["orders", "payments", "refunds"])
    assert list(queue_urls) == ["orders", "payments", "refunds"]
    existence = scope.verify_queues_exist(list(queue_urls.values()) + ["http://localhost:4566/000000000000/nope"])
    assert existence == {**{queue_url: True for queue_url in queue_urls.values()}, "http://localhost:4566/000000000000/nope": False}
    scope.close()
    assert in_memory_sqs_service.list_queues() == []


def test_scope_delete_test_queue(in_memory_sqs_service):
    scope = SQSTestScope(in_memory_sqs_service)
    keep = scope.create_test_queue("keep")
    remove = scope.create_test_queue("remove")
    scope.delete_test_queue(remove)
    assert scope.created_queues == (keep,)
    assert not scope.verify_queue_exists(remove)
    with pytest.raises(QueueNotFound):
        scope.delete_test_queue(remove)
    with pytest.raises(ValueError):
        scope.delete_test_queue("")
    with pytest.raises(ValueError):
        scope.create_test_queue(" ")
    scope.close()


def test_scope_close_never_raises(in_memory_sqs_service):
    scope = SQSTestScope(in_memory_sqs_service, tracker=ResourceTracker())
    deleted_elsewhere = scope.create_test_queue("a")
    survivor = scope.create_test_queue("b")
    in_memory_sqs_service.delete_queue(deleted_elsewhere)  # e.g. the test itself deleted it without telling the scope
    assert scope.close() == [deleted_elsewhere]
    assert not in_memory_sqs_service.queue_exists(survivor)


def test_scope_create_failure_not_tracked():
    sqs_service = InMemorySQSService()
    sqs_service.create_queue("test-run3-orders-1", {"VisibilityTimeout": "5"})  # same name, different attributes
    scope = SQSTestScope(sqs_service, QueueNameGenerator("run3"))
    with pytest.raises(SQSServiceException):
        scope.create_test_queue("orders", {"VisibilityTimeout": "60"})
    assert scope.created_queues == ()


def test_scope_wait_for_sqs_ready(in_memory_sqs_service):
    scope = SQSTestScope(in_memory_sqs_service)
    assert scope.wait_for_sqs_ready() == 1


def test_scope_wait_for_sqs_not_ready():
    class UnreachableSQSService(InMemorySQSService):
        def list_queues(self, prefix=None):
            raise SQSServiceException("ListQueues failed : connection refused", "ListQueues")

    scope = SQSTestScope(UnreachableSQSService())
    with pytest.raises(ReadinessTimeout):
        scope.wait_for_sqs_ready(0.2)


def test_scope_with_sqs_service(sqs_test_scope):
    queue_url = sqs_test_scope.create_test_queue("integration")
    assert f"test-{test_localsqs_str}-integration-1" in queue_url
    assert sqs_test_scope.verify_queue_exists(queue_url)
    sqs_test_scope.close()
    assert not sqs_test_scope.sqs_service.queue_exists(queue_url)
