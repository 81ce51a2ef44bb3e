"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request, WebSocket

from incell.bridge import Bridge


def get_bridge(request: Request) -> Bridge:
    return request.app.state.bridge


def get_ws_bridge(websocket: WebSocket) -> Bridge:
    return websocket.app.state.bridge
