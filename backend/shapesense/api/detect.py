"""POST /api/detect — shape detection on a raw RGBA buffer."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import AsyncGenerator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from shapesense.engine.context import DetectionContext
from shapesense.engine.pipeline import build_context, build_result, create_pipeline
from shapesense.models.requests import DetectRequest
from shapesense.models.responses import DetectResponse

logger = logging.getLogger(__name__)

router = APIRouter()


_SENTINEL = object()  # marks end of queue


def _to_response(ctx: DetectionContext, elapsed_ms: float) -> DetectResponse:
    return DetectResponse(
        result=build_result(ctx, elapsed_ms),
        components_found=ctx.num_components,
        rejections=ctx.rejections,
        errors=ctx.errors,
    )


def _run_detection(req: DetectRequest) -> DetectResponse:
    start = time.perf_counter()
    ctx = build_context(req.raw_pixels(), req.width, req.height)
    create_pipeline().run(ctx)
    return _to_response(ctx, (time.perf_counter() - start) * 1000)


@router.post("/detect", response_model=DetectResponse)
async def detect(req: DetectRequest) -> DetectResponse:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _run_detection, req)


async def _stream_detect(req: DetectRequest) -> AsyncGenerator[str, None]:
    """Drive pipeline.run_streaming() in a thread, yielding SSE events as they arrive."""
    start = time.perf_counter()
    ctx = build_context(req.raw_pixels(), req.width, req.height)

    pipeline = create_pipeline()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def _run_pipeline() -> None:
        """Sync pipeline in thread — pushes progress dicts onto the async queue."""
        try:
            for progress in pipeline.run_streaming(ctx):
                loop.call_soon_threadsafe(queue.put_nowait, progress)
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    # Start pipeline in a thread so the event loop stays free to flush SSE
    future = loop.run_in_executor(None, _run_pipeline)

    while True:
        item = await queue.get()
        if item is _SENTINEL:
            break
        yield f"event: progress\ndata: {json.dumps(item)}\n\n"

    try:
        await future
    except Exception as e:
        logger.warning("Streaming detection failed: %s", e)
        data = json.dumps({"type": "error", "message": str(e)})
        yield f"event: error\ndata: {data}\n\n"
        return

    response = _to_response(ctx, (time.perf_counter() - start) * 1000)
    yield f"event: result\ndata: {response.model_dump_json()}\n\n"

    yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"


@router.post("/detect/stream")
async def detect_stream(req: DetectRequest) -> StreamingResponse:
    return StreamingResponse(
        _stream_detect(req),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
