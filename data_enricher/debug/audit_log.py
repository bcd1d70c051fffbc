"""Simple JSON-lines audit writer for PII redaction events.

Writes one JSON object per line with the schema:
  {time, item_id, pii_type, placeholder, matches, original_len, redacted_len}

Files are written to: {audit_dir}/{YYYY-MM-DD}.jsonl
Records carry lengths and counts only, never the text itself.
"""

from __future__ import annotations

import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Union

from data_enricher.validation.pii import Redaction

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_DIR = Path("logs") / "pii_audit"


def _get_audit_file_path(audit_dir: Union[str, Path] = DEFAULT_AUDIT_DIR) -> Path:
    out_dir = Path(audit_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    today = datetime.date.today().isoformat()
    return out_dir / f"{today}.jsonl"


def log_redaction(event: Dict[str, Any], audit_dir: Union[str, Path] = DEFAULT_AUDIT_DIR) -> bool:
    """Append a single redaction event as one JSON line.

    Expected fields in ``event`` (best-effort): item_id, pii_type,
    placeholder, matches, original_len, redacted_len. Any ``text`` field is
    dropped.

    Returns True on success, False on failure.
    """
    try:
        p = _get_audit_file_path(audit_dir)
        rec: Dict[str, Any] = {"time": datetime.datetime.now(datetime.timezone.utc).isoformat()}
        rec["item_id"] = event.get("item_id")
        rec["pii_type"] = event.get("pii_type") or "unknown"
        rec["placeholder"] = event.get("placeholder")
        rec["matches"] = int(event.get("matches", 0))
        rec["original_len"] = int(event.get("original_len", 0))
        rec["redacted_len"] = int(event.get("redacted_len", 0))
        with open(p, "a", encoding="utf-8") as fh:
            fh.write(json.dumps(rec, ensure_ascii=False) + "\n")
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Failed to write redaction audit record: %s", e)
        return False


def log_item_redactions(item_id: int, redactions: Iterable[Redaction], audit_dir: Union[str, Path] = DEFAULT_AUDIT_DIR) -> int:
    """Write one audit line per redacted category; returns lines written."""
    written = 0
    for r in redactions:
        event = {
            "item_id": item_id,
            "pii_type": r.pii_type,
            "placeholder": r.placeholder,
            "matches": r.matches,
            "original_len": r.original_len,
            "redacted_len": r.redacted_len,
        }
        if log_redaction(event, audit_dir):
            written += 1
    return written


__all__ = ["log_redaction", "log_item_redactions"]
