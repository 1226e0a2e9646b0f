from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import json
import logging
from app.database import utcnow
from app.services.notifier import WSManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])

def _manager(ws: WebSocket):
    notifier = ws.app.state.notifier
    return notifier if isinstance(notifier, WSManager) else None

@router.websocket("/ws/dashboard")
async def dashboard_stream(ws: WebSocket):
    manager = _manager(ws)
    if manager is None:
        await ws.close(code=1013)
        return
    await manager.connect_dashboard(ws)
    try:
        while True:
            await ws.receive_text()  # dashboards only listen
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)

@router.websocket("/ws/user/{user_id}")
async def user_stream(ws: WebSocket, user_id: str):
    manager = _manager(ws)
    if manager is None:
        await ws.close(code=1013)
        return
    await manager.connect_user(ws, user_id)
    try:
        while True:
            raw = await ws.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                logger.debug("Ignoring non-JSON frame from user %s", user_id)
                continue
            # Guards may also stream fixes over the socket; relay them to dashboards
            if isinstance(message, dict) and message.get("event") == "location:update":
                data = message.get("data")
                manager.broadcast_to_dashboards("guard:location", {
                    **(data if isinstance(data, dict) else {}),
                    "guard_id": user_id,
                    "timestamp": utcnow(),
                })
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)
