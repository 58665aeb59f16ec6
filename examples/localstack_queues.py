from ismain import is_main

from localsqs import LocalStackContainer, LocalStackSettings, SQSTestScope, RetryPolicy, retry


def localstack_queues():
    settings = LocalStackSettings(image="localstack/localstack:4.4.0", startup_timeout=180.0)
    with LocalStackContainer(settings) as localstack:
        print(f"localstack at {localstack.endpoint_url}")
        with SQSTestScope(localstack.sqs_service) as scope:
            queue_urls = scope.create_test_queues(["orders", "payments"])

            def all_listed() -> bool:
                if not all(scope.verify_queues_exist(queue_urls.values()).values()):
                    raise RuntimeError("queues not listed yet")
                return True

            retry(all_listed, RetryPolicy(max_attempts=5))
            for base_name, queue_url in queue_urls.items():
                print(f"{base_name} : {queue_url}")


if is_main():
    localstack_queues()
