from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
from loguru import logger
from shared.models import DreamAnalysisResult
from .factory import BedrockTextModel, make_model, parse_json_text

ANALYSIS_TEMPERATURE = 0.7
GENERIC_FAILURE_MESSAGE = "Failed to analyze the dream. Please try again."
QUOTA_STATUS = 429
QUOTA_MARKER = "quota"

SYSTEM_INSTRUCTION = r"""
ROLE
You are a world-renowned oneirologist with more than 25 years of experience in psychoanalysis,
neuroscience and dream interpretation. You combine the analytical precision of Freud and Jung
with modern sleep science.

TASK
Analyze the dreamer's description of a dream.

DREAM LEVELS GUIDE (use it to set dreamLevel and dreamLevelLabel)
Level 1: Surface Processing (day residue, mundane tasks, low emotion).
Level 2: Symbolic Sorting (working through recent mild emotions, confusing but not intense).
Level 3: Deep Subconscious (vivid symbols, strong emotions, childhood memories, archetypes).
Level 4: High Intensity / Lucid (awareness within the dream, flying, extreme vividness, or intense nightmares).
Level 5: Transcendental / Night Terror (life-altering impact, sleep paralysis, prophetic feeling,
extreme physiological response).

STYLE
Provide a professional, empathetic and insightful report. Be precise in your symbolism.
""".strip()

DREAM_ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string", "description": "A creative, mystical title for the dream."},
        "dreamLevel": {"type": "integer", "minimum": 1, "maximum": 5,
                       "description": "Intensity level from 1 (Mundane) to 5 (Lucid/Prophetic/Night Terror)."},
        "dreamLevelLabel": {"type": "string", "description": "Label for the level, e.g. 'Deep Subconscious'."},
        "summary": {"type": "string", "description": "A concise summary of the dream narrative."},
        "interpretation": {"type": "string",
                           "description": "A deep psychoanalytic interpretation (Freudian/Jungian/Gestalt)."},
        "symbols": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "meaning": {"type": "string"},
                    "archetype": {"type": "string", "description": "Associated Jungian archetype, if any."},
                },
                "required": ["name", "meaning", "archetype"],
            },
        },
        "psychologicalState": {
            "type": "object",
            "properties": {
                "stressLevel": {"type": "integer", "minimum": 0, "maximum": 100,
                                "description": "Estimated stress level of the dreamer (0-100)."},
                "burnoutRisk": {"type": "string", "enum": ["Low", "Moderate", "High", "Severe"]},
                "emotions": {"type": "array", "items": {"type": "string"},
                             "description": "3-5 specific emotions felt during the dream."},
            },
            "required": ["stressLevel", "burnoutRisk", "emotions"],
        },
        "healthReport": {
            "type": "object",
            "properties": {
                "sleepQualityLikelihood": {"type": "string", "description": "Likely sleep quality."},
                "suggestedBedtimeRoutine": {"type": "string", "description": "Actionable advice to improve sleep."},
                "wakingLifeCorrelation": {"type": "string", "description": "Links to waking life events."},
            },
            "required": ["sleepQualityLikelihood", "suggestedBedtimeRoutine", "wakingLifeCorrelation"],
        },
    },
    "required": ["title", "dreamLevel", "dreamLevelLabel", "summary", "interpretation",
                 "symbols", "psychologicalState", "healthReport"],
}

FALLBACK_PAYLOAD: Dict[str, Any] = {
    "title": "Simulation: API Limit Reached",
    "dreamLevel": 3,
    "dreamLevelLabel": "Simulation Mode",
    "summary": "The AI service is currently experiencing high traffic (Quota Exceeded). This is a simulated analysis to demonstrate the application's features without consuming API credits.",
    "interpretation": "In a real analysis, this section would contain a deep Freudian or Jungian interpretation of your specific dream text. Currently, we are showing a placeholder to preserve functionality during high load. The application interface, charts, and export functions remain fully operational.",
    "symbols": [
        {"name": "Hourglass", "meaning": "The passage of time and patience required.", "archetype": "Father Time"},
        {"name": "Wall", "meaning": "A temporary barrier or limitation encountered.", "archetype": "The Threshold Guardian"},
        {"name": "Key", "meaning": "The potential to unlock access once the barrier is removed.", "archetype": "The Hero"},
    ],
    "psychologicalState": {
        "stressLevel": 42,
        "burnoutRisk": "Low",
        "emotions": ["Patience", "Determination", "Hope"],
    },
    "healthReport": {
        "sleepQualityLikelihood": "Likely Uninterrupted",
        "suggestedBedtimeRoutine": "Practice mindfulness breathing to reduce frustration with technical limits.",
        "wakingLifeCorrelation": "You may be encountering temporary restrictions in your daily life or work.",
    },
}

FALLBACK_ANALYSIS = DreamAnalysisResult.model_validate(FALLBACK_PAYLOAD)


class DreamAnalysisError(RuntimeError):
    """Generic, user-facing analysis failure. The cause is logged, never attached."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)


def build_request(dream_text: str, context: Optional[str] = None,
                  sleep_quality: Optional[int] = None) -> Tuple[str, str]:
    """Return ``(system_instruction, prompt)`` for one analysis."""
    if not dream_text or not dream_text.strip():
        raise ValueError("dream text must not be empty")

    lines = [
        "Analyze the following dream description:",
        f'"{dream_text}"',
        "",
    ]
    if context:
        lines.append(f"Additional context from the dreamer: {context}")
    if sleep_quality:
        lines.append(
            f"Reported sleep quality before the dream: {sleep_quality}/5 (1=Poor, 5=Excellent). "
            "Use it to refine the physiological and health analysis, correlating poor sleep "
            "with stress and burnout markers where applicable."
        )
    lines.append("Provide the output strictly in JSON format matching the schema.")
    return SYSTEM_INSTRUCTION, "\n".join(lines)


def _is_quota_code(code: Any) -> bool:
    if code is None:
        return False
    if str(code) == str(QUOTA_STATUS):
        return True
    return isinstance(code, str) and QUOTA_MARKER in code.lower()


def _nested_code(error: BaseException) -> Any:
    nested = getattr(error, "error", None)
    if isinstance(nested, dict):
        return nested.get("code")
    return getattr(nested, "code", None)


def is_quota_exceeded(error: BaseException) -> bool:
    """True when a service error signals quota exhaustion or rate limiting.

    Checks, in order: a 429 ``status``/``status_code`` attribute, a botocore-style
    ``response`` dict (HTTP status or error code), a nested ``error.code``, and
    finally the message text for "429" or "quota".
    """
    for attr in ("status", "status_code"):
        if str(getattr(error, attr, None)) == str(QUOTA_STATUS):
            return True

    response = getattr(error, "response", None)
    if isinstance(response, dict):
        meta = response.get("ResponseMetadata") or {}
        if meta.get("HTTPStatusCode") == QUOTA_STATUS:
            return True
        if _is_quota_code((response.get("Error") or {}).get("Code")):
            return True

    if _is_quota_code(_nested_code(error)):
        return True

    message = str(error)
    return str(QUOTA_STATUS) in message or QUOTA_MARKER in message.lower()


class DreamAnalyzer:
    """Sends one dream to the text model and returns its structured analysis.

    Holds no per-call state, so one instance can serve concurrent requests.
    """

    def __init__(self, model: Optional[BedrockTextModel] = None):
        self.model = model if model is not None else make_model(temperature=ANALYSIS_TEMPERATURE)

    async def analyze(self, dream_text: str, context: Optional[str] = None,
                      sleep_quality: Optional[int] = None) -> DreamAnalysisResult:
        system, prompt = build_request(dream_text, context, sleep_quality)

        try:
            text = await self.model.ask_async(prompt, system=system, json_schema=DREAM_ANALYSIS_SCHEMA)
        except Exception as e:
            if is_quota_exceeded(e):
                logger.warning("Model quota exceeded ({}); returning simulated analysis", type(e).__name__)
                return FALLBACK_ANALYSIS
            logger.opt(exception=e).error("Error analyzing dream")
            raise DreamAnalysisError() from None

        if not text:
            logger.error("Error analyzing dream: no response received from the model")
            raise DreamAnalysisError()

        try:
            return DreamAnalysisResult.model_validate(parse_json_text(text))
        except Exception as e:
            logger.opt(exception=e).error("Error analyzing dream: response does not match the schema")
            raise DreamAnalysisError() from None


_default: Optional[DreamAnalyzer] = None

def default_analyzer() -> DreamAnalyzer:
    global _default
    if _default is None:
        _default = DreamAnalyzer()
    return _default

async def analyze_dream(dream_text: str, context: Optional[str] = None,
                        sleep_quality: Optional[int] = None) -> DreamAnalysisResult:
    return await default_analyzer().analyze(dream_text, context, sleep_quality)
