#!/usr/bin/env python3
"""FastAPI application exposing the TESSERA layout triggers and frame stream."""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.websockets import WebSocketState
from pydantic import BaseModel, Field

from core.config import TesseraConfig
from core.exceptions import GalleryNotReadyError, TransitionConfigError, UnknownLayoutError
from core.gallery import Gallery
from core.logging import configure_logging, get_logger
from core.records import RecordSource
from core.render import Frame

logger = get_logger(__name__)


# Request/Response Models
class GalleryStatus(BaseModel):
    """Gallery status response."""

    state: str
    entity_count: int
    current_layout: Optional[str]
    is_animating: bool
    active_tasks: int
    clock_state: str
    elapsed_time: float
    frame_count: int
    layout_sizes: dict[str, int]


class TransitionRequest(BaseModel):
    """Optional override of the base duration for a layout trigger."""

    base_duration: Optional[float] = Field(default=None, ge=0)


class ViewportRequest(BaseModel):
    """New viewport size in pixels."""

    width: int = Field(gt=0)
    height: int = Field(gt=0)


def create_app(gallery: Optional[Gallery] = None, config: Optional[TesseraConfig] = None) -> FastAPI:
    """Build the app around a gallery.

    When no gallery is passed, one backed by the configured HTTP data source is
    created, initialized, and started in the lifespan.
    """
    config = config or TesseraConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        logger.info("Starting TESSERA API server...")

        if app.state.gallery is None:
            source = RecordSource(config.data_source_url, timeout=config.request_timeout)
            app.state.gallery = Gallery(source, config=config)

        current = app.state.gallery
        if not current.is_ready:
            await current.initialize()
        await current.start()
        logger.info("Gallery started", state=current.state.value, entity_count=current.entity_count)

        yield

        logger.info("Shutting down TESSERA API server...")
        await current.stop()

    app = FastAPI(
        title="TESSERA",
        description="Animated 3D layouts for record cards",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.gallery = gallery

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def require_gallery() -> Gallery:
        current = app.state.gallery
        if current is None or not current.is_ready:
            raise HTTPException(status_code=503, detail="Gallery not initialized")
        return current

    # REST Endpoints
    @app.get("/api")
    async def api_info():
        """API information endpoint."""
        current = app.state.gallery
        return {
            "name": "TESSERA",
            "version": "0.1.0",
            "status": current.state.value if current else "uninitialized",
        }

    @app.get("/status", response_model=GalleryStatus)
    async def get_status():
        """Get current gallery status."""
        current = app.state.gallery
        if current is None:
            raise HTTPException(status_code=503, detail="Gallery not initialized")
        return GalleryStatus(**current.get_status())

    @app.get("/layouts")
    async def list_layouts():
        """Cached layouts and their target counts."""
        return {"layouts": require_gallery().layout_sizes()}

    @app.post("/layouts/{name}")
    async def trigger_layout(name: str, request: Optional[TransitionRequest] = None):
        """Animate every entity toward the named layout."""
        current = require_gallery()
        base_duration = request.base_duration if request else None

        try:
            layout = current.transform_to(name, base_duration)
        except UnknownLayoutError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except TransitionConfigError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except GalleryNotReadyError as e:
            raise HTTPException(status_code=503, detail=str(e))

        return {"layout": layout.value, "active_tasks": current.transitions.active_task_count}

    @app.get("/frame")
    async def get_frame():
        """Current transform of every entity."""
        return require_gallery().get_frame().to_dict()

    @app.post("/viewport")
    async def resize_viewport(request: ViewportRequest):
        """Record a new viewport size and redraw once."""
        frame = require_gallery().resize(request.width, request.height)
        return {"viewport": frame.to_dict()["viewport"], "sequence": frame.sequence}

    # WebSocket endpoint for real-time frame streaming
    @app.websocket("/ws/frames")
    async def websocket_frames(websocket: WebSocket):
        """Stream rendered frames in real-time via WebSocket."""
        await websocket.accept()

        current = app.state.gallery
        if current is None or not current.is_ready:
            await websocket.close(code=1011, reason="Gallery not initialized")
            return

        logger.info("WebSocket client connected")
        queue: asyncio.Queue[Frame] = asyncio.Queue(maxsize=1)

        def enqueue_frame(frame: Frame) -> None:
            # keep only the newest frame for slow clients
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(frame)

        async def pump_frames() -> None:
            while True:
                frame = await queue.get()
                await websocket.send_json(frame.to_dict())

        async def receive_messages() -> None:
            # Keep connection alive and handle incoming messages
            while True:
                message = await websocket.receive_text()
                logger.debug("WebSocket message received", message=message)

        await websocket.send_json(current.get_frame().to_dict())
        current.add_render_listener(enqueue_frame)
        sender = asyncio.create_task(pump_frames())
        receiver = asyncio.create_task(receive_messages())

        try:
            done, pending = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

            for task in done:
                error = task.exception()
                if isinstance(error, WebSocketDisconnect):
                    logger.info("WebSocket client disconnected")
                elif error is not None:
                    logger.error("WebSocket error", error=str(error), error_type=type(error).__name__)
                    if websocket.client_state == WebSocketState.CONNECTED:
                        await websocket.close(code=1011, reason="Frame stream failed")
        finally:
            current.remove_render_listener(enqueue_frame)
            sender.cancel()
            receiver.cancel()
            logger.info("WebSocket connection closed")

    return app


def build_default_app() -> FastAPI:
    config = TesseraConfig()
    configure_logging(config.log_level)
    return create_app(config=config)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:build_default_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
