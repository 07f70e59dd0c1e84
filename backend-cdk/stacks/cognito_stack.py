# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import os

from aws_cdk import (
    CfnOutput,
    Duration,
    RemovalPolicy,
    Stack,
    aws_cognito as cognito,
    aws_iam as iam,
    aws_lambda as _lambda,
)
from constructs import Construct

from lambdas.group_classifier import BUYER, SELLER

LAMBDAS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'lambdas')


class CognitoStack(Stack):
    """ user pool with buyer/seller groups, the post confirmation trigger that
    fills them and an identity pool federating the user pool client """

    def __init__(self, scope: Construct, construct_id: str, context_key: str = 'cognito', **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        context: dict = dict(self.node.try_get_context(context_key) or {})

        self.auto_group_assignment_fn = self.create_trigger_function(context)
        self.user_pool = self.create_user_pool(context)
        self.user_pool_client = self.create_user_pool_client()
        self.identity_pool, self.authenticated_role = self.create_identity_pool(context)

        # groups are created without IAM roles, storage access hangs off the identity pool role
        self.buyer_group = cognito.CfnUserPoolGroup(
            self, 'BuyerGroup',
            user_pool_id=self.user_pool.user_pool_id,
            group_name=BUYER,
            description='Buyer group',
        )
        self.seller_group = cognito.CfnUserPoolGroup(
            self, 'SellerGroup',
            user_pool_id=self.user_pool.user_pool_id,
            group_name=SELLER,
            description='Seller group',
        )

        # wildcard resource, the pool arn would create a circular dependency with the trigger
        self.auto_group_assignment_fn.add_to_role_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=['cognito-idp:AdminAddUserToGroup'],
                resources=['*'],
            )
        )

        CfnOutput(self, 'UserPoolId',
                  value=self.user_pool.user_pool_id,
                  description='Cognito User Pool ID',
                  export_name='CognitoUserPoolId')
        CfnOutput(self, 'UserPoolClientId',
                  value=self.user_pool_client.user_pool_client_id,
                  description='Cognito User Pool Client ID',
                  export_name='CognitoUserPoolClientId')
        CfnOutput(self, 'IdentityPoolId',
                  value=self.identity_pool.ref,
                  description='Cognito Identity Pool ID',
                  export_name='CognitoIdentityPoolId')
        CfnOutput(self, 'AuthenticatedRoleArn',
                  value=self.authenticated_role.role_arn,
                  description='Identity Pool Authenticated Role ARN')
        CfnOutput(self, 'Region',
                  value=self.region,
                  description='AWS Region')

    def create_trigger_function(self, context):
        return _lambda.Function(
            self, 'AutoGroupAssignmentLambda',
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler='auto_group_assignment.lambda_handler',
            code=_lambda.Code.from_asset(LAMBDAS_DIR, exclude=['__pycache__', '*.pyc']),
            timeout=Duration.seconds(context.get('trigger_timeout_in_seconds', 5)),
            environment={
                'region': self.region,
                'logLevel': context.get('log_level', 'INFO'),
            },
        )

    def create_user_pool(self, context):
        return cognito.UserPool(
            self, 'UserPool',
            user_pool_name=context.get('user_pool_name', 'cognito-user-pool-pattern'),
            sign_in_case_sensitive=False,
            self_sign_up_enabled=True,
            user_verification=cognito.UserVerificationConfig(
                email_subject='Verify your email for our app!',
                email_body='Thanks for signing up! Your verification code is {####}',
                email_style=cognito.VerificationEmailStyle.CODE,
                sms_message='Your verification code is {####}',
            ),
            sign_in_aliases=cognito.SignInAliases(email=True),
            auto_verify=cognito.AutoVerifiedAttrs(email=True),
            standard_attributes=cognito.StandardAttributes(
                email=cognito.StandardAttribute(required=True, mutable=True),
                given_name=cognito.StandardAttribute(required=True, mutable=True),
                family_name=cognito.StandardAttribute(required=True, mutable=True),
            ),
            custom_attributes={
                'user_type': cognito.StringAttribute(mutable=True),
            },
            password_policy=cognito.PasswordPolicy(
                min_length=8,
                require_lowercase=True,
                require_uppercase=True,
                require_digits=True,
                require_symbols=False,
            ),
            lambda_triggers=cognito.UserPoolTriggers(
                post_confirmation=self.auto_group_assignment_fn
            ),
            removal_policy=RemovalPolicy.DESTROY,
            deletion_protection=False,
        )

    def create_user_pool_client(self):
        return self.user_pool.add_client(
            'UserPoolClient',
            user_pool_client_name='cognito-user-pool-client',
            generate_secret=False,
            auth_flows=cognito.AuthFlow(
                user_password=True,
                user_srp=True,
            ),
            access_token_validity=Duration.minutes(60),
            id_token_validity=Duration.minutes(60),
            refresh_token_validity=Duration.days(30),
            enable_token_revocation=True,
        )

    def create_identity_pool(self, context):
        identity_pool = cognito.CfnIdentityPool(
            self, 'IdentityPool',
            identity_pool_name=context.get('identity_pool_name', 'cognito-identity-pool-pattern'),
            allow_unauthenticated_identities=False,
            cognito_identity_providers=[
                cognito.CfnIdentityPool.CognitoIdentityProviderProperty(
                    client_id=self.user_pool_client.user_pool_client_id,
                    provider_name=self.user_pool.user_pool_provider_name,
                )
            ],
        )

        # no policies attached: group membership does not change storage access here
        authenticated_role = iam.Role(
            self, 'AuthenticatedRole',
            assumed_by=iam.FederatedPrincipal(
                'cognito-identity.amazonaws.com',
                conditions={
                    'StringEquals': {
                        'cognito-identity.amazonaws.com:aud': identity_pool.ref
                    },
                    'ForAnyValue:StringLike': {
                        'cognito-identity.amazonaws.com:amr': 'authenticated'
                    },
                },
                assume_role_action='sts:AssumeRoleWithWebIdentity',
            ),
            description='Role for authenticated identity pool users',
        )

        cognito.CfnIdentityPoolRoleAttachment(
            self, 'IdentityPoolRoleAttachment',
            identity_pool_id=identity_pool.ref,
            roles={'authenticated': authenticated_role.role_arn},
        )

        return identity_pool, authenticated_role
