import shutil

import pytest

if shutil.which("node") is None:
    pytest.skip("CDK synth requires a node runtime", allow_module_level=True)

aws_cdk = pytest.importorskip("aws_cdk")

from aws_cdk import App, Environment
from aws_cdk.assertions import Match, Template

from stacks.cognito_stack import CognitoStack


@pytest.fixture(scope="module")
def template():
    app = App()
    stack = CognitoStack(app, "TestCognitoStack", env=Environment(region="ap-southeast-2"))
    return Template.from_stack(stack)


def test_user_pool_policies(template):
    template.has_resource_properties("AWS::Cognito::UserPool", {
        "UserPoolName": "cognito-user-pool-pattern",
        "Policies": {
            "PasswordPolicy": {
                "MinimumLength": 8,
                "RequireLowercase": True,
                "RequireUppercase": True,
                "RequireNumbers": True,
                "RequireSymbols": False,
            }
        },
        "LambdaConfig": {"PostConfirmation": Match.any_value()},
    })


@pytest.mark.parametrize("attribute", [
    {"Name": "email", "Required": True},
    {"Name": "given_name", "Required": True},
    {"Name": "family_name", "Required": True},
    {"Name": "user_type", "AttributeDataType": "String", "Mutable": True},
])
def test_user_pool_schema(template, attribute):
    template.has_resource_properties("AWS::Cognito::UserPool", {
        "Schema": Match.array_with([Match.object_like(attribute)])
    })


def test_client_token_validity(template):
    template.has_resource_properties("AWS::Cognito::UserPoolClient", {
        "GenerateSecret": False,
        "AccessTokenValidity": 60,
        "IdTokenValidity": 60,
        "EnableTokenRevocation": True,
    })


@pytest.mark.parametrize("group", ["buyer", "seller"])
def test_groups(template, group):
    template.has_resource_properties("AWS::Cognito::UserPoolGroup", {"GroupName": group})


def test_only_two_groups(template):
    template.resource_count_is("AWS::Cognito::UserPoolGroup", 2)


def test_trigger_function(template):
    template.has_resource_properties("AWS::Lambda::Function", {
        "Handler": "auto_group_assignment.lambda_handler",
        "Runtime": "python3.12",
        "Timeout": 5,
    })


def test_trigger_can_add_users_to_groups(template):
    template.has_resource_properties("AWS::IAM::Policy", {
        "PolicyDocument": {
            "Statement": Match.array_with([
                Match.object_like({
                    "Action": "cognito-idp:AdminAddUserToGroup",
                    "Effect": "Allow",
                    "Resource": "*",
                })
            ])
        }
    })


def test_identity_pool(template):
    template.has_resource_properties("AWS::Cognito::IdentityPool", {
        "AllowUnauthenticatedIdentities": False,
    })
    template.resource_count_is("AWS::Cognito::IdentityPoolRoleAttachment", 1)


def test_trigger_timeout_fits_cognito_budget(template):
    functions = template.find_resources("AWS::Lambda::Function", {
        "Properties": {"Handler": "auto_group_assignment.lambda_handler"}
    })
    (function,) = functions.values()
    assert 3 < function["Properties"]["Timeout"] <= 5


def test_authenticated_role_has_no_policies(template):
    template.has_resource_properties("AWS::IAM::Role", {
        "Description": "Role for authenticated identity pool users",
        "Policies": Match.absent(),
        "ManagedPolicyArns": Match.absent(),
    })
