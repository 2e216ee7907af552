import aws_cdk as cdk
from stacks import DreamStack

app = cdk.App()
DreamStack(app, "OneiroDreamStack",
    model_id=app.node.try_get_context("model_id") or "us.anthropic.claude-sonnet-4-20250514-v1:0",
    stage=app.node.try_get_context("stage") or "dev",
    env=cdk.Environment(
        account=app.node.try_get_context("account"),
        region=app.node.try_get_context("region") or "us-west-2"
    )
)
app.synth()
