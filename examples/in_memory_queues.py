from ismain import is_main

from localsqs import InMemorySQSService, SQSTestScope, QueueNameGenerator


def in_memory_queues():
    # same interface as SQSService, no AWS or Docker needed
    with SQSTestScope(InMemorySQSService(), QueueNameGenerator("example")) as scope:
        queue_url = scope.create_test_queue("orders")
        print(queue_url)  # http://localhost:4566/000000000000/test-example-orders-1
        print(scope.created_queues)


if is_main():
    in_memory_queues()
