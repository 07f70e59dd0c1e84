"""
Shared pytest fixtures for test suite.
"""

import os

# the trigger module builds its boto3 client at import time
os.environ.setdefault('AWS_DEFAULT_REGION', 'ap-southeast-2')

import pytest


@pytest.fixture
def registration_event():
    """Returns a factory building Cognito post confirmation events."""
    def _create(user_attributes=None):
        event = {
            'version': '1',
            'region': 'ap-southeast-2',
            'userPoolId': 'ap-southeast-2_AbCdEf123',
            'userName': 'bdcae07c5-23a3-2342-91cf-a23471f234',
            'callerContext': {
                'awsSdkVersion': 'aws-sdk-unknown-unknown',
                'clientId': '1example23456789',
            },
            'triggerSource': 'PostConfirmation_ConfirmSignUp',
            'request': {},
            'response': {},
        }
        if user_attributes is not None:
            event['request']['userAttributes'] = user_attributes
        return event
    return _create
