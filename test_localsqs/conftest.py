import os
import logging

import pytest

from localsqs import is_mock, use_moto_mock_env_var, is_using_localstack, SQSService, InMemorySQSService, SQSTestScope, QueueNameGenerator

from test_localsqs import test_localsqs_str

mock_env_var = os.environ.get(use_moto_mock_env_var)

if mock_env_var is None:
    # facilitates CI by using mocking by default
    os.environ[use_moto_mock_env_var] = "1"


class TestLocalSQSLoggingHandler(logging.Handler):
    def emit(self, record):
        print(record.getMessage())
        assert False


@pytest.fixture(scope="session", autouse=True)
def session_fixture():
    # add handler that will throw an assert on ERROR or greater
    test_handler = TestLocalSQSLoggingHandler()
    test_handler.setLevel(logging.ERROR)
    logging.getLogger().addHandler(test_handler)

    print(f"{is_mock()=},{is_using_localstack()=}")


@pytest.fixture()
def sqs_service():
    _sqs_service = SQSService()
    yield _sqs_service
    _sqs_service.close()


@pytest.fixture()
def in_memory_sqs_service():
    return InMemorySQSService()


@pytest.fixture()
def sqs_test_scope(sqs_service):
    with SQSTestScope(sqs_service, QueueNameGenerator(test_localsqs_str)) as scope:
        yield scope
