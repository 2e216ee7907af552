from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass(frozen=True)
class Settings:
    aws_region: str = os.getenv("AWS_REGION", "us-west-2")
    stage: str = os.getenv("STAGE", "dev")

    # Bedrock
    bedrock_text_model_id: str = os.getenv("BEDROCK_TEXT_MODEL_ID", "us.anthropic.claude-sonnet-4-20250514-v1:0")
    bedrock_connect_timeout: int = int(os.getenv("BEDROCK_CONNECT_TIMEOUT", "5"))
    bedrock_read_timeout: int = int(os.getenv("BEDROCK_READ_TIMEOUT", "90"))
    llm_max_tokens: int = int(os.getenv("LLM_MAX_TOKENS", "4096"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Journal
    journal_path: str = os.getenv("DREAM_JOURNAL_PATH", "~/.oneiro/dream_journal.json")

    @property
    def is_development(self) -> bool:
        return self.stage == "dev"

settings = Settings()
