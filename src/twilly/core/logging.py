"""
API call logging for Twilly.

Records every request made to Twilio as one JSON line per call:
logs/twilly-api/calls_YYYY-MM-DD.jsonl
"""

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import aiofiles


class ApiCallLogger:
    """
    Appends a JSONL record for each Twilio API call.

    Credentials are never written; query strings are stripped from URLs so
    filters containing personal data (addresses, identities) stay out of the log.
    """

    def __init__(self, base_log_dir: Path):
        self.base_log_dir = Path(base_log_dir)
        self.log_dir = self.base_log_dir / "twilly-api"
        self._write_lock = asyncio.Lock()

    def log_file_for(self, day: datetime) -> Path:
        return self.log_dir / f"calls_{day.strftime('%Y-%m-%d')}.jsonl"

    async def log_call(
        self,
        method: str,
        url: str,
        status: Optional[int],
        elapsed_ms: float,
        error: Optional[str] = None,
    ) -> None:
        """
        Log a single API call.

        Args:
            method: HTTP method
            url: Requested URL (query string is dropped)
            status: HTTP status code, or None when no response was received
            elapsed_ms: Round trip time in milliseconds
            error: Error description when the call failed
        """
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)

            now = datetime.now()
            log_entry = {
                "timestamp": now.isoformat(),
                "method": method,
                "url": strip_query(url),
                "status": status,
                "elapsed_ms": round(elapsed_ms, 1),
            }
            if error:
                log_entry["error"] = error

            async with self._write_lock:
                async with aiofiles.open(self.log_file_for(now), "a", encoding="utf-8") as f:
                    await f.write(json.dumps(log_entry, ensure_ascii=False) + "\n")

        except Exception as e:
            # Fallback to standard logging if file write fails
            logging.error(f"Failed to write API call log to {self.log_dir}: {e}")


def strip_query(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def configure_logging(level: str = "WARNING") -> None:
    """Configure process-wide logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # httpx logs every request at INFO; keep it quiet unless debugging
    if logging.getLogger().level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
