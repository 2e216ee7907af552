from __future__ import annotations
import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from shared.aws import bedrock_runtime
from shared.config import settings

JSON_ONLY = (
    "\n\nOUTPUT FORMAT (STRICT)\n"
    "Return ONE valid JSON object and nothing else. No markdown/backticks, "
    "no text before or after the object.\n"
    "It MUST conform to this JSON schema (every property is required):\n"
)

@dataclass
class ModelOptions:
    model_id: str
    temperature: float = 0.3
    max_tokens: Optional[int] = None


def with_response_format(system: str, json_schema: Dict[str, Any]) -> str:
    return system.rstrip() + JSON_ONLY + json.dumps(json_schema, ensure_ascii=False)


def _response_text(resp: Dict[str, Any]) -> str:
    content: List[Dict[str, Any]] = ((resp.get("output") or {}).get("message") or {}).get("content") or []
    return "".join(block.get("text", "") for block in content if isinstance(block, dict))


def parse_json_text(text: str) -> Any:
    """Decode the model's JSON output, tolerating one surrounding code fence."""
    t = text.strip()
    if t.startswith("```"):
        t = t.split("\n", 1)[1] if "\n" in t else ""
        if t.rstrip().endswith("```"):
            t = t.rstrip()[:-3]
    return json.loads(t)


class BedrockTextModel:
    """One-shot text generation against the Bedrock Converse API."""

    def __init__(self, opts: ModelOptions, client=None):
        self.opts = opts
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = bedrock_runtime()
        return self._client

    def _request(self, prompt: str, system: str) -> Dict[str, Any]:
        inference: Dict[str, Any] = {"temperature": self.opts.temperature}
        if self.opts.max_tokens is not None:
            inference["maxTokens"] = self.opts.max_tokens
        return {
            "modelId": self.opts.model_id,
            "system": [{"text": system}],
            "messages": [{"role": "user", "content": [{"text": prompt}]}],
            "inferenceConfig": inference,
        }

    def ask(self, prompt: str, *, system: str,
            json_schema: Optional[Dict[str, Any]] = None) -> str:
        if json_schema:
            system = with_response_format(system, json_schema)
        resp = self.client.converse(**self._request(prompt, system))
        return _response_text(resp)

    async def ask_async(self, prompt: str, *, system: str,
                        json_schema: Optional[Dict[str, Any]] = None) -> str:
        return await asyncio.to_thread(self.ask, prompt, system=system, json_schema=json_schema)


def make_model(*, temperature: float, client=None, model_id: Optional[str] = None) -> BedrockTextModel:
    opts = ModelOptions(
        model_id=model_id or settings.bedrock_text_model_id,
        temperature=temperature,
        max_tokens=settings.llm_max_tokens or None,
    )
    return BedrockTextModel(opts, client=client)
