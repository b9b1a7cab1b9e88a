"""Runtime introspection endpoints.

Stand-ins for a profiler: a stack dump of every live thread and
garbage-collector statistics.
"""

from __future__ import annotations

import gc
import sys
import threading
import traceback

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/threads", response_class=PlainTextResponse)
def threads() -> str:
    names = {t.ident: t.name for t in threading.enumerate()}
    chunks = []
    for ident, frame in sys._current_frames().items():
        chunks.append(f"Thread {names.get(ident, '?')} (ident={ident}):\n")
        chunks.append("".join(traceback.format_stack(frame)))
        chunks.append("\n")
    return "".join(chunks)


@router.get("/gc")
def gc_stats():
    return {
        "enabled": gc.isenabled(),
        "counts": list(gc.get_count()),
        "thresholds": list(gc.get_threshold()),
        "generations": gc.get_stats(),
        "tracked_objects": len(gc.get_objects()),
    }
