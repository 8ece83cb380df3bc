"""Main FastAPI application with WebSocket support."""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from api.websocket_handler import ws_handler
from config.settings import settings
from models.database import close_mongo_connection, init_mongo
from utils.logger import setup_logger

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    logger.info("Starting application...")
    await init_mongo()  # Connect to MongoDB and create indexes
    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await close_mongo_connection()
    logger.info("Application shut down")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Personal workout and nutrition diary with AI plan generation",
    lifespan=lifespan
)

# Local frontend dev servers plus configured origins
frontend_origins = [
    "http://localhost:5173",  # Vite default
    "http://127.0.0.1:5173",
    "http://localhost:3000",  # React default
    "http://127.0.0.1:3000",
] + settings.cors_origins

# Remove duplicates while preserving order
unique_origins = list(dict.fromkeys(frontend_origins))

logger.info(f"CORS configured with origins: {unique_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=unique_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.app_name} API",
        "version": settings.app_version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.app_name
    }


@app.websocket("/ws/session")
async def session_endpoint(websocket: WebSocket):
    """WebSocket endpoint driving one client's screens."""
    session_id = str(uuid.uuid4())

    try:
        session = await ws_handler.connect(websocket, session_id)

        while True:
            message = await websocket.receive_text()
            logger.debug(f"Received message from {session_id} ({len(message)} bytes)")
            await session.handle_message(message)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {session_id}")
    except Exception as e:
        logger.error(f"WebSocket error: {e}", exc_info=True)
    finally:
        await ws_handler.disconnect(session_id)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
