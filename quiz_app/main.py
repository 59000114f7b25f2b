# FastAPI entry point; wires the trivia client, question repository and session engine
# quiz_app/main.py
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quiz_app.endpoints import (
    auth as auth_router,
    sessions as sessions_router,
    topics as topics_router,
)
from quiz_app.services.question_repository import QuestionRepository
from quiz_app.services.session_engine import SessionEngine
from quiz_app.utils.config import settings
from quiz_app.utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Knowledge Quest API starting up...")
    client = httpx.AsyncClient(timeout=settings.request_timeout_s)
    app.state.engine = SessionEngine(QuestionRepository(client))
    logger.info(f"Using trivia provider at {settings.trivia_api_url}.")
    logger.info("Startup complete.")
    yield
    # On shutdown
    logger.info("Knowledge Quest API shutting down...")
    app.state.engine.close_all()
    await client.aclose()

# --- FastAPI App Initialization ---
app = FastAPI(
    title="Knowledge Quest API",
    description="Timed trivia quiz sessions backed by Open Trivia DB.",
    version="1.0.0",
    lifespan=lifespan
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this to your frontend's domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Routers ---
app.include_router(auth_router.router, prefix="/login", tags=["Login"])
app.include_router(topics_router.router, prefix="/topics", tags=["Topics"])
app.include_router(sessions_router.router, prefix="/sessions", tags=["Sessions"])

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {"message": "Welcome to the Knowledge Quest API"}
