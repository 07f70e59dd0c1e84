#!/usr/bin/env python3
# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from aws_cdk import App, Environment

from stacks.cognito_stack import CognitoStack

app = App()

region = app.node.try_get_context('region')

CognitoStack(app, 'CognitoStack', 'cognito', env=Environment(region=region))

app.synth()
