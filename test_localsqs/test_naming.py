import pytest

from localsqs import QueueNameGenerator, sanitize_queue_name, is_valid_queue_name, extract_queue_name_from_url, generate_test_queue_names, assert_valid_queue_url


def test_sanitize_queue_name():
    assert sanitize_queue_name("orders") == "orders"
    assert sanitize_queue_name("My Queue!") == "My-Queue"
    assert sanitize_queue_name("a..b//c") == "a-b-c"
    assert sanitize_queue_name("--edge--") == "edge"
    assert sanitize_queue_name("keep_underscores") == "keep_underscores"
    assert sanitize_queue_name("!!!") == "default"
    assert sanitize_queue_name("   ") == "default"
    assert sanitize_queue_name("") == "default"
    assert sanitize_queue_name(None) == "default"
    assert len(sanitize_queue_name("x" * 100)) == 30


def test_is_valid_queue_name():
    assert is_valid_queue_name("orders")
    assert is_valid_queue_name("orders-2_b")
    assert is_valid_queue_name("a" * 80)
    assert not is_valid_queue_name("a" * 81)
    assert not is_valid_queue_name("")
    assert not is_valid_queue_name(" ")
    assert not is_valid_queue_name(None)
    assert not is_valid_queue_name("has space")
    assert not is_valid_queue_name("dot.name")
    assert not is_valid_queue_name("-leading")
    assert not is_valid_queue_name("trailing_")


def test_extract_queue_name_from_url():
    assert extract_queue_name_from_url("http://localhost:4566/000000000000/my-queue") == "my-queue"
    assert extract_queue_name_from_url("https://sqs.us-east-1.amazonaws.com/123456789012/orders") == "orders"
    with pytest.raises(ValueError):
        extract_queue_name_from_url("")
    with pytest.raises(ValueError):
        extract_queue_name_from_url("http://localhost:4566/my-queue")


def test_assert_valid_queue_url():
    assert_valid_queue_url("http://localhost:4566/000000000000/my-queue")
    assert_valid_queue_url("http://127.0.0.1:49153/000000000000/my-queue", "my-queue")
    assert_valid_queue_url("http://sqs.us-east-1.localhost.localstack.cloud:4566/000000000000/my-queue", "my-queue")
    with pytest.raises(ValueError):
        assert_valid_queue_url("")
    with pytest.raises(ValueError):
        assert_valid_queue_url("not a url")
    with pytest.raises(ValueError):
        assert_valid_queue_url("https://sqs.us-east-1.amazonaws.com/123456789012/orders")
    with pytest.raises(ValueError):
        assert_valid_queue_url("http://localhost:4566/000000000000/my-queue", "other-queue")


def test_generate_test_queue_names():
    assert generate_test_queue_names("orders", 3) == ["orders-001", "orders-002", "orders-003"]
    with pytest.raises(ValueError):
        generate_test_queue_names("", 3)
    with pytest.raises(ValueError):
        generate_test_queue_names("orders", 0)


def test_queue_name_generator_deterministic():
    generator = QueueNameGenerator("run42")
    assert generator.unique_name("orders") == "test-run42-orders-1"
    assert generator.unique_name("orders") == "test-run42-orders-2"
    assert generator.unique_name("My Queue!") == "test-run42-My-Queue-3"
    # a new generator with the same instance ID starts over
    assert QueueNameGenerator("run42").unique_name("orders") == "test-run42-orders-1"


def test_queue_name_generator_default_instance_id():
    generator = QueueNameGenerator(clock=lambda: 1700000000.123)
    assert generator.instance_id.startswith("1700000000123-")
    name = generator.unique_name("x" * 200)
    assert is_valid_queue_name(name)
    assert len(name) <= 80
    assert QueueNameGenerator().instance_id != QueueNameGenerator(clock=lambda: 1.0).instance_id
