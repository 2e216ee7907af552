from __future__ import annotations
import asyncio
import json
from shared.log_setup import setup_logging
from agents.dream_analysis import DreamAnalysisError, analyze_dream

setup_logging()

def _ok(body, code=200):
    return {"statusCode": code, "headers": {"Content-Type": "application/json"},
            "body": json.dumps(body, ensure_ascii=False)}

def handler(event, _ctx):
    body = event.get("body") or "{}"
    try:
        payload = json.loads(body)
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    text = str(payload.get("text") or payload.get("q") or "")
    if not text.strip():
        return _ok({"error": "missing text"}, 400)

    try:
        result = asyncio.run(analyze_dream(text, payload.get("context"), payload.get("sleep_quality")))
    except DreamAnalysisError as e:
        return _ok({"error": str(e)}, 502)
    return _ok(result.model_dump(mode="json"))
