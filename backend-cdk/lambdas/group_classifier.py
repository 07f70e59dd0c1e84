# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from collections.abc import Mapping
from typing import TypedDict

BUYER = 'buyer'
SELLER = 'seller'
VALID_GROUPS = (BUYER, SELLER)
DEFAULT_GROUP = BUYER

# substrings that mark an email address as belonging to a seller
SELLER_EMAIL_MARKERS = ('seller', 'vendor', 'supplier')

UserAttributes = TypedDict('UserAttributes', {
    'custom:user_type': str,
    'user_type': str,
    'email': str,
}, total=False)


def _user_type(attributes):
    for key in ('custom:user_type', 'user_type'):
        value = attributes.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def classify_user(attributes: UserAttributes) -> str:
    """ map the user pool attributes of a new user to one of the fixed groups.

    an explicit user type wins over the email heuristic. the email check
    looks at the full lower cased address, domain included. any candidate
    that is not a known group name (e.g. 'admin' or 'Buyer') collapses to
    the default group, custom group names are not supported """
    if not isinstance(attributes, Mapping):
        attributes = {}

    candidate = _user_type(attributes)
    if candidate is None:
        email = attributes.get('email')
        if isinstance(email, str):
            email = email.lower()
            if any(marker in email for marker in SELLER_EMAIL_MARKERS):
                candidate = SELLER
            else:
                candidate = BUYER
        else:
            candidate = DEFAULT_GROUP

    if candidate not in VALID_GROUPS:
        candidate = DEFAULT_GROUP

    return candidate
