from __future__ import annotations
import boto3
from botocore.config import Config
from .config import settings

_bedrock = None

def _bedrock_config() -> Config:
    # A throttled call must surface on the first attempt.
    return Config(
        retries={"total_max_attempts": 1, "mode": "standard"},
        connect_timeout=settings.bedrock_connect_timeout,
        read_timeout=settings.bedrock_read_timeout,
    )

def bedrock_runtime():
    global _bedrock
    if _bedrock is None:
        _bedrock = boto3.client(
            "bedrock-runtime",
            region_name=settings.aws_region,
            config=_bedrock_config(),
        )
    return _bedrock
