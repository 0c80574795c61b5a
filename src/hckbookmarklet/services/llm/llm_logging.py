# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm logging unit so this responsibility stays isolated, testable, and easy to evolve."""

from __future__ import annotations

import datetime
import json
import os
import uuid
from typing import Any, Dict, List

from hckbookmarklet.core.config import LOGS_DIR

MAX_LOG_ENTRIES = 100

# Upstream exchanges for the current process, newest last.
# Only filled when HCK_LLM_DEBUG is enabled; entries hold user questions.
llm_logs: List[Dict[str, Any]] = []


def llm_debug_enabled() -> bool:
    """Return whether the in-memory exchange log and its debug routes are on."""
    return os.getenv("HCK_LLM_DEBUG", "0") in ("1", "true", "TRUE", "yes", "on")


def _dump_path() -> str:
    return os.getenv("HCK_LLM_DUMP_PATH") or str(LOGS_DIR / "llm_raw.log")


def _dump_to_file(log_entry: Dict[str, Any]) -> None:
    log_path = _dump_path()
    directory = os.path.dirname(log_path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(log_path, "a", encoding="utf-8") as f:
            f.write("=" * 80 + "\n")
            f.write(f"TIMESTAMP: {datetime.datetime.now().isoformat()}\n")
            f.write("-" * 80 + "\n")
            f.write(json.dumps(log_entry, indent=2, default=str, ensure_ascii=False))
            f.write("\n" + "=" * 80 + "\n\n")
    except OSError:
        # Dump file is a dev-only aid
        pass


def add_llm_log(log_entry: Dict[str, Any]) -> None:
    """Add a log entry to the global list, keeping only the last 100 entries.

    No-op unless HCK_LLM_DEBUG is enabled.
    """
    if not llm_debug_enabled():
        return
    if log_entry not in llm_logs:
        llm_logs.append(log_entry)
        if len(llm_logs) > MAX_LOG_ENTRIES:
            llm_logs.pop(0)


def finish_llm_log(log_entry: Dict[str, Any]) -> None:
    """Stamp the end time and, if HCK_LLM_DUMP is set, append the entry to the dump file."""
    log_entry["timestamp_end"] = datetime.datetime.now().isoformat()
    if os.getenv("HCK_LLM_DUMP") == "1":
        _dump_to_file(log_entry)


def create_log_entry(
    url: str, method: str, headers: Dict[str, str], body: Any
) -> Dict[str, Any]:
    """Create a new log entry structure."""
    return {
        "id": str(uuid.uuid4()),
        "timestamp_start": datetime.datetime.now().isoformat(),
        "timestamp_end": None,
        "request": {
            "url": url,
            "method": method,
            "headers": {
                k: ("***" if k.lower() in ("authorization", "x-api-key") else v)
                for k, v in headers.items()
            },
            "body": body,
        },
        "response": {
            "status_code": None,
            "body": None,
            "error_detail": None,
        },
    }
