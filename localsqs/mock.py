import os
from functools import cache

from tobool import to_bool_strict

use_moto_mock_env_var = "LOCALSQS_USE_MOTO_MOCK"
use_localstack_env_var = "LOCALSQS_USE_LOCALSTACK"
localstack_endpoint_env_var = "LOCALSQS_LOCALSTACK_ENDPOINT"

default_localstack_endpoint = "http://localhost:4566"


@cache
def is_mock() -> bool:
    """
    Is using moto mock?
    :return: True if using moto mock.
    """
    return to_bool_strict(os.environ.get(use_moto_mock_env_var, "0"))


@cache
def is_using_localstack() -> bool:
    """
    Is using an already running localstack (i.e. not one started by this package)?
    :return: True if using an existing localstack.
    """
    return to_bool_strict(os.environ.get(use_localstack_env_var, "0"))


def get_localstack_endpoint() -> str:
    return os.environ.get(localstack_endpoint_env_var, default_localstack_endpoint)
