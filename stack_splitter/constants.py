"""Centralized constants for stack splitting."""

# Template sections
TEMPLATE_FORMAT_VERSION = "AWSTemplateFormatVersion"
TEMPLATE_FORMAT_VERSION_VALUE = "2010-09-09"
DESCRIPTION = "Description"
PARAMETERS = "Parameters"
RESOURCES = "Resources"
OUTPUTS = "Outputs"

# Resource attributes
TYPE = "Type"
PROPERTIES = "Properties"
DEPENDS_ON = "DependsOn"
VALUE = "Value"

# Intrinsic functions
REF = "Ref"
GET_ATT = "Fn::GetAtt"
PSEUDO_PARAMETER_PREFIX = "AWS::"

# Resource types
NESTED_STACK_TYPE = "AWS::CloudFormation::Stack"
LAMBDA_FUNCTION_TYPE = "AWS::Lambda::Function"
PARAMETER_TYPE = "String"

# Nested stack naming
NESTED_STACK_LOGICAL_ID = "NestedStack{index}"
NESTED_STACK_FILE_NAME = "cloudformation-template-nested-stack-{index}.json"
NESTED_STACK_DESCRIPTION = 'Stack for function "{anchor}" and its dependencies'
UPDATED_TEMPLATE_FILE_NAME = "cloudformation-template-update-stack.json"
NESTED_STACK_OUTPUT_ATTRIBUTE = "Outputs.{name}"

# Remote template location
S3_BASE_URL = "https://s3.amazonaws.com"
DEPLOYMENT_BUCKET_PLACEHOLDER = "%DEPLOYMENT-BUCKET-NAME%"

# Platform limits
MAX_TEMPLATE_RESOURCES = 500
MAX_TEMPLATE_BODY_BYTES = 1_000_000
