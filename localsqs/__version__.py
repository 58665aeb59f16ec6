__application_name__ = "localsqs"
__title__ = __application_name__
__author__ = "localsqs contributors"
__version__ = "0.3.1"
__description__ = "Spin up LocalStack and manage throwaway SQS queues in integration tests"
