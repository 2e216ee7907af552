from __future__ import annotations
from typing import Optional
from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field
from shared.config import settings
from shared.log_setup import setup_logging
from shared.models import DreamAnalysisResult
from agents.dream_analysis import DreamAnalysisError, DreamAnalyzer, default_analyzer

setup_logging()

app = FastAPI(title="Oneiro Dream API", version="1.0.0")


class AnalyzeRequest(BaseModel):
    text: str = Field(..., description="Dream narrative")
    context: Optional[str] = Field(None, description="Optional waking-life context")
    sleep_quality: Optional[int] = Field(None, description="Sleep quality before the dream, 1-5")


def get_analyzer() -> DreamAnalyzer:
    return default_analyzer()


@app.get("/ping")
def ping():
    return {
        "ok": True,
        "region": settings.aws_region,
        "model": settings.bedrock_text_model_id,
        "stage": settings.stage,
    }


@app.post("/analyze", response_model=DreamAnalysisResult)
async def analyze(req: AnalyzeRequest, analyzer: DreamAnalyzer = Depends(get_analyzer)):
    """
    Analyzes one dream. On quota exhaustion the body is the simulated analysis
    (still a 200); any other model failure is a 502 with a fixed message.
    """
    if not req.text.strip():
        raise HTTPException(status_code=400, detail="Dream text is required.")
    try:
        return await analyzer.analyze(req.text, req.context, req.sleep_quality)
    except DreamAnalysisError as e:
        raise HTTPException(status_code=502, detail=str(e))
