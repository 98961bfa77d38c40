import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
import socketio

from app.routers import matches
from app.core.config import settings
from app.socket_handlers import register_socketio_handlers
from app.socket_instance import sio

logging.basicConfig(level=settings.LOG_LEVEL)

# Initialize FastAPI app, but name it 'fastapi_app' to avoid conflict
fastapi_app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

fastapi_app.state.sio = sio

# Set all CORS enabled origins
if settings.ALLOWED_ORIGINS:
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).strip() for origin in settings.ALLOWED_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

fastapi_app.include_router(matches.router, prefix=f"{settings.API_V1_STR}/matches", tags=["matches"])

@fastapi_app.get("/health", tags=["health"])
def read_root():
    return {"status": "ok"}

# Create the final ASGI app that wraps FastAPI and Socket.IO.
# This 'app' is what uvicorn will run.
app = socketio.asgi.ASGIApp(sio, other_asgi_app=fastapi_app)
register_socketio_handlers(sio)
