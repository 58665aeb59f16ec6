import os
from typing import Union, Any
from logging import getLogger

from typeguard import typechecked

from localsqs.__version__ import __application_name__
from localsqs.mock import is_mock, is_using_localstack, get_localstack_endpoint

log = getLogger(__application_name__)

# localstack accepts any credentials
localstack_access_key_id = "test"
localstack_secret_access_key = "test"


def boto_error_to_string(boto_error) -> Union[str, None]:
    """
    Get the AWS error code (e.g. "AWS.SimpleQueueService.NonExistentQueue") from a botocore error.

    :param boto_error: botocore exception
    :return: error code string, or None if the error doesn't carry one
    """
    if (response := getattr(boto_error, "response", None)) is None:
        most_recent_error = str(boto_error)
    else:
        if (response_error := response.get("Error")) is None:
            most_recent_error = None
        else:
            most_recent_error = response_error.get("Code")
    return most_recent_error


class AWSAccess:
    @typechecked()
    def __init__(
        self,
        resource_name: Union[str, None] = None,
        profile_name: Union[str, None] = None,
        aws_access_key_id: Union[str, None] = None,
        aws_secret_access_key: Union[str, None] = None,
        region_name: Union[str, None] = None,
        endpoint_url: Union[str, None] = None,
    ):
        """
        AWSAccess - takes care of basic AWS access (session and client), and mock/localstack support for testing.

        :param resource_name: AWS resource name (e.g. sqs). Can be None if just testing the connection.

        # Provide either: profile name or access key ID/secret access key pair

        :param profile_name: AWS profile name
        :param aws_access_key_id: AWS access key (required if secret_access_key given)
        :param aws_secret_access_key: AWS secret access key (required if access_key_id given)
        :param region_name: AWS region (may be optional - see AWS docs)
        :param endpoint_url: explicit endpoint (e.g. a localstack container's mapped port). Implies localstack-style dummy credentials if no keys given.
        """

        import boto3  # import here to facilitate mocking

        self.resource_name = resource_name
        self.profile_name = profile_name
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.region_name = region_name
        self.endpoint_url = endpoint_url

        # string representation of AWS most recent error code
        self.most_recent_error = None  # type: Union[str, None]

        self._moto_mock = None
        self._aws_keys_save = {}

        self.client = None  # type: Any

        if self.endpoint_url is None and is_using_localstack():
            self.endpoint_url = get_localstack_endpoint()

        if self.endpoint_url is not None:
            # localstack (either one we started or one already running)
            if self.aws_access_key_id is None:
                self.aws_access_key_id = localstack_access_key_id
                self.aws_secret_access_key = localstack_secret_access_key
            if self.region_name is None:
                self.region_name = "us-east-1"
            self.session = boto3.session.Session(
                aws_access_key_id=self.aws_access_key_id, aws_secret_access_key=self.aws_secret_access_key, region_name=self.region_name
            )
            if self.resource_name is not None:
                self.client = self.session.client(self.resource_name, endpoint_url=self.endpoint_url)  # type: ignore
        elif is_mock():
            # moto mock AWS
            for aws_key in ["AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SECURITY_TOKEN", "AWS_SESSION_TOKEN"]:
                self._aws_keys_save[aws_key] = os.environ.get(aws_key)  # will be None if not set
                os.environ[aws_key] = "testing"

            from moto import mock_aws

            self._moto_mock = mock_aws()
            self._moto_mock.start()
            if self.region_name is None:
                self.region_name = "us-east-1"
            self.session = boto3.session.Session(region_name=self.region_name)
            if self.resource_name is not None:
                self.client = self.session.client(self.resource_name)  # type: ignore
        else:
            # use keys in AWS config
            # https://docs.aws.amazon.com/cli/latest/userguide/cli-config-files.html
            kwargs = {}
            for k in ["profile_name", "aws_access_key_id", "aws_secret_access_key", "region_name"]:
                if getattr(self, k) is not None:
                    kwargs[k] = getattr(self, k)
            self.session = boto3.session.Session(**kwargs)
            if self.resource_name is not None:
                self.client = self.session.client(self.resource_name, config=self._get_config())  # type: ignore

    def _get_config(self):
        from botocore.config import Config  # import here to facilitate mocking

        timeout = 60  # tests should fail fast rather than hang on a dead endpoint
        return Config(connect_timeout=timeout, read_timeout=timeout, retries={"max_attempts": 2})

    @typechecked()
    def get_region(self) -> Union[str, None]:
        """
        Get current selected AWS region

        :return: region string
        """
        return self.session.region_name

    def is_mocked(self) -> bool:
        """
        Return True if currently mocking the AWS interface (e.g. for testing).

        :return: True if mocked
        """
        return self._moto_mock is not None

    def clear_most_recent_error(self):
        self.most_recent_error = None

    def close(self):
        """
        Release the client's connection pool and, if mocking, put the environment back.
        """
        if self.client is not None:
            self.client.close()
        if self._moto_mock is not None:
            for aws_key, value in self._aws_keys_save.items():
                if value is None:
                    os.environ.pop(aws_key, None)
                else:
                    os.environ[aws_key] = value

            self._moto_mock.stop()
            self._moto_mock = None  # mock is "done"

    def __del__(self):
        if getattr(self, "_moto_mock", None) is not None:
            self.close()
