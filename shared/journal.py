from __future__ import annotations
import json
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from loguru import logger
from pydantic import ValidationError
from .config import settings
from .models import DreamAnalysisResult, JournalEntry

def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"

def _now_ms() -> int: return int(time.time() * 1000)


class DreamJournal:
    """Saved analyses kept in one local JSON file, newest first."""

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path or settings.journal_path).expanduser()

    def _load_raw(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Failed to parse dream journal {}: {}", self.path, e)
            return []
        if not isinstance(data, list):
            logger.error("Dream journal {} is not a list; ignoring it", self.path)
            return []
        return data

    def _write(self, entries: List[JournalEntry]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [e.model_dump(mode="json") for e in entries]
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def entries(self) -> List[JournalEntry]:
        out: List[JournalEntry] = []
        for raw in self._load_raw():
            try:
                out.append(JournalEntry.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed journal entry {}: {}", raw.get("id") if isinstance(raw, dict) else None, e)
        return out

    def save(self, result: DreamAnalysisResult) -> JournalEntry:
        data = result.model_dump(mode="json")
        data.pop("id", None)
        data.pop("timestamp", None)
        entry = JournalEntry(**data, id=new_id("drm"), timestamp=_now_ms())
        self._write([entry] + self.entries())
        logger.info("Saved dream {} to journal", entry.id)
        return entry

    def get(self, entry_id: str) -> Optional[JournalEntry]:
        return next((e for e in self.entries() if e.id == entry_id), None)

    def delete(self, entry_id: str) -> bool:
        entries = self.entries()
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        self._write(kept)
        logger.info("Deleted dream {} from journal", entry_id)
        return True
