"""Shared fixtures: a stubbed Bedrock client and canned model output."""

import copy
import json
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from agents.dream_analysis import DreamAnalyzer
from agents.factory import BedrockTextModel, ModelOptions

VALID_ANALYSIS = {
    "title": "The Glass Metropolis",
    "dreamLevel": 4,
    "dreamLevelLabel": "High Intensity / Lucid",
    "summary": "The dreamer flies above a city built entirely of glass.",
    "interpretation": "Flight suggests a wish for perspective; transparent buildings point to exposure.",
    "symbols": [
        {"name": "Flying", "meaning": "Freedom and rising above constraints.", "archetype": "The Hero"},
        {"name": "Glass city", "meaning": "Fragility and visibility of one's structures.", "archetype": "The Self"},
    ],
    "psychologicalState": {
        "stressLevel": 35,
        "burnoutRisk": "Moderate",
        "emotions": ["Awe", "Vulnerability", "Freedom"],
    },
    "healthReport": {
        "sleepQualityLikelihood": "Likely vivid REM-heavy sleep",
        "suggestedBedtimeRoutine": "Dim screens an hour before bed.",
        "wakingLifeCorrelation": "A situation where you feel observed.",
    },
}


@pytest.fixture
def valid_analysis():
    """A fresh copy of a schema-conforming analysis payload."""
    return copy.deepcopy(VALID_ANALYSIS)


@pytest.fixture
def converse_response():
    """Build a Bedrock Converse response carrying the given text."""
    def _make(text):
        return {
            "output": {"message": {"role": "assistant", "content": [{"text": text}]}},
            "stopReason": "end_turn",
        }
    return _make


@pytest.fixture
def client_error():
    """Build a botocore ClientError as raised by bedrock-runtime."""
    def _make(code, status, message="Service error"):
        return ClientError(
            {
                "Error": {"Code": code, "Message": message},
                "ResponseMetadata": {"HTTPStatusCode": status},
            },
            "Converse",
        )
    return _make


@pytest.fixture
def bedrock_client():
    return Mock()


@pytest.fixture
def analyzer(bedrock_client):
    model = BedrockTextModel(ModelOptions(model_id="test-model", temperature=0.7), client=bedrock_client)
    return DreamAnalyzer(model=model)


@pytest.fixture
def answering_analyzer(analyzer, bedrock_client, converse_response, valid_analysis):
    """Analyzer whose model answers with ``valid_analysis``."""
    bedrock_client.converse.return_value = converse_response(json.dumps(valid_analysis))
    return analyzer
