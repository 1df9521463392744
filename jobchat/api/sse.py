"""Server-sent event framing for streamed chat replies."""

import json
from typing import Any, Dict, Optional

from fastapi import Request

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    # Stop reverse proxies from buffering the stream
    "X-Accel-Buffering": "no",
}


def format_sse(frame: Dict[str, Any]) -> str:
    """Encode one frame as an SSE "data:" message."""
    return f"data: {json.dumps(frame, ensure_ascii=False)}\n\n"


def wants_event_stream(request: Request, stream_flag: Optional[bool]) -> bool:
    """Stream when the body asks for it or the client accepts text/event-stream."""
    if stream_flag is not None:
        return stream_flag
    return "text/event-stream" in request.headers.get("accept", "")
