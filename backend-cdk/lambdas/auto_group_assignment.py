# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import boto3
import logging
import os
from collections.abc import Mapping
from typing import NamedTuple, Optional
from botocore.config import Config

from group_classifier import classify_user

# general env variables
region = os.environ.get('region')
api_connect_timeout = float(os.environ.get('apiConnectTimeout', '1'))
api_read_timeout = float(os.environ.get('apiReadTimeout', '2'))

logging.getLogger().setLevel(os.environ.get('logLevel', 'INFO'))

# create Cognito client once per container, one attempt per call.
# connect + read timeouts stay below the 5 s Cognito trigger budget
idp_client = boto3.client(
    'cognito-idp',
    region_name=region,
    config=Config(
        connect_timeout=api_connect_timeout,
        read_timeout=api_read_timeout,
        retries={'total_max_attempts': 1}))


class AssignmentOutcome(NamedTuple):
    succeeded: bool
    reason: Optional[str] = None


def get_user_attributes(event):
    """ return the user attributes of a post confirmation event, an empty
    mapping when the request or its attributes are missing or malformed """
    request = event.get('request')
    if not isinstance(request, Mapping):
        return {}
    attributes = request.get('userAttributes')
    if not isinstance(attributes, Mapping):
        return {}
    return attributes


def add_user_to_group(user_pool_id, username, group_name):
    try:
        idp_client.admin_add_user_to_group(
            UserPoolId=user_pool_id,
            Username=username,
            GroupName=group_name
        )
    except Exception as error:
        return AssignmentOutcome(False, str(error))
    return AssignmentOutcome(True)


def lambda_handler(event, context):
    """ Cognito post confirmation trigger: put the new user into the buyer or
    seller group. Cognito continues the sign up with whatever we return, so
    the event goes back untouched even when the assignment fails """
    username = event.get('userName')

    group_name = classify_user(get_user_attributes(event))

    outcome = add_user_to_group(event.get('userPoolId'), username, group_name)
    if outcome.succeeded:
        logging.info('Successfully assigned user %s to group %s', username, group_name)
    else:
        logging.error('Error assigning user %s to group %s: %s', username, group_name, outcome.reason)

    return event
