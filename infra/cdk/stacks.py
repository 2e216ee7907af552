from __future__ import annotations
from aws_cdk import (
    Stack, Duration, CfnOutput,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_apigateway as apigw,
)
from constructs import Construct
from aws_cdk.aws_lambda_python_alpha import PythonFunction, PythonLayerVersion


class DreamStack(Stack):
    def __init__(self, scope: Construct, _id: str, *, model_id: str, stage: str = "dev", **kwargs):
        super().__init__(scope, _id, **kwargs)

        bedrock = iam.ManagedPolicy(self, "LambdaBedrockPolicy",
            statements=[
                iam.PolicyStatement(actions=["bedrock:InvokeModel"], resources=["*"]),
            ])

        role = iam.Role(self, "OneiroLambdaRole",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name("service-role/AWSLambdaBasicExecutionRole"),
                bedrock,
            ])

        # Third-party runtime dependencies only; the function bundles the repo root.
        app_layer = PythonLayerVersion(
            self, "AppCommonLayer",
            entry="layers/app_common",
            compatible_runtimes=[_lambda.Runtime.PYTHON_3_11]
        )

        env = {
            "BEDROCK_TEXT_MODEL_ID": model_id,
            "LLM_MAX_TOKENS": "4096",
            "BEDROCK_READ_TIMEOUT": "25",
            "STAGE": stage,
            "LOG_LEVEL": "INFO",
        }

        fn_analyze = PythonFunction(self, "AnalyzeFn",
            entry=".", index="lambdas/analyze/index.py", handler="handler",
            runtime=_lambda.Runtime.PYTHON_3_11, memory_size=512, timeout=Duration.seconds(30),
            environment=env, role=role, layers=[app_layer])

        api = apigw.RestApi(self, "OneiroApi",
            rest_api_name="Oneiro Dream API",
            deploy_options=apigw.StageOptions(stage_name=stage))

        api.root.add_resource("analyze").add_method("POST", apigw.LambdaIntegration(fn_analyze))
        CfnOutput(self, "ApiUrl", value=api.url)
