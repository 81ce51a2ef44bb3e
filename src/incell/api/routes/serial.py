"""API routes for the serial connection."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from incell.api.deps import get_bridge, get_ws_bridge
from incell.bridge import Bridge
from incell.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/serial", tags=["serial"])


class ConnectRequest(BaseModel):
    """Connect body; the bridge validates the values."""

    path: str
    baud_rate: int | str = 115200
    data_bits: int | str = 8
    parity: str = "none"
    stop_bits: float | str = 1


class SendRequest(BaseModel):
    data: str


@router.get("/ports")
async def list_ports(bridge: Bridge = Depends(get_bridge)) -> dict:
    """List available serial ports."""
    return (await bridge.list_ports()).to_wire()


@router.post("/connect")
async def connect(req: ConnectRequest, bridge: Bridge = Depends(get_bridge)) -> dict:
    """Open a serial connection, replacing any existing one."""
    outcome = await bridge.connect(
        req.path,
        req.baud_rate,
        req.data_bits,
        req.parity,
        req.stop_bits,
    )
    return outcome.to_wire()


@router.post("/disconnect")
async def disconnect(bridge: Bridge = Depends(get_bridge)) -> dict:
    """Close the serial connection."""
    return (await bridge.disconnect()).to_wire()


@router.post("/send")
async def send(req: SendRequest, bridge: Bridge = Depends(get_bridge)) -> dict:
    """Write text to the device and wait for it to drain."""
    return (await bridge.send(req.data)).to_wire()


@router.websocket("/events")
async def events(websocket: WebSocket, bridge: Bridge = Depends(get_ws_bridge)) -> None:
    """Stream status, data and error events as JSON."""
    subscription = bridge.subscribe()
    await websocket.accept()

    async def forward() -> None:
        async for event in subscription:
            await websocket.send_json(event.model_dump(exclude_none=True))

    forwarder = asyncio.create_task(forward())
    try:
        # Inbound messages are ignored; this only waits for the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("event_stream_closed")
    finally:
        forwarder.cancel()
        await asyncio.gather(forwarder, return_exceptions=True)
        subscription.close()
