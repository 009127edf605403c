from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.websockets import WebSocketState

from chatrelay import __version__
from chatrelay.broadcast import Broadcaster
from chatrelay.config import Settings, get_settings
from chatrelay.connection import Connection
from chatrelay.handler import ConnectionHandler
from chatrelay.logger import logger
from chatrelay.registry import ConnectionRegistry


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title='ChatRelay', version=__version__)

    # Allow the static chat client (served elsewhere) to call the REST endpoints
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    # One registry per app; it is the only state shared between connections
    registry = ConnectionRegistry()
    broadcaster = Broadcaster(registry)
    app.state.settings = settings
    app.state.registry = registry
    app.state.broadcaster = broadcaster

    @app.on_event('startup')
    async def startup_event():
        logger.info(f"ChatRelay {__version__} accepting WebSocket clients on {settings.ws_path}")

    @app.on_event('shutdown')
    async def shutdown_event():
        logger.info(f"ChatRelay shutting down with {await registry.count()} users online")

    @app.get('/')
    async def index():
        return HTMLResponse(
            f'<h3>ChatRelay running. Connect via WebSocket at {settings.ws_path} '
            f'and send {{"type": "identify", "username": "YOURNAME"}}</h3>'
        )

    @app.get('/online')
    async def online():
        return JSONResponse({'online': await registry.count()})

    @app.websocket(settings.ws_path)
    async def websocket_endpoint(websocket: WebSocket):
        await websocket.accept()
        connection = Connection(websocket, outbox_size=settings.outbox_size)
        logger.log_connection(connection.connection_id, connection.peer)
        handler = ConnectionHandler(connection, registry, broadcaster, settings)
        try:
            await handler.run()
        finally:
            # the handler may stop while the client is still attached
            if (websocket.client_state == WebSocketState.CONNECTED
                    and websocket.application_state == WebSocketState.CONNECTED):
                await websocket.close()

    return app


app = create_app()
