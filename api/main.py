"""
Chat Commerce API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI application
app = FastAPI(
    title="Chat Commerce API",
    description="REST API for turning chat sell commands into orders",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS - Allow all origins for development
# TODO: Restrict origins to the storefront domain once it is deployed
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "chat-commerce-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Chat Commerce API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import chats, sell_commands

app.include_router(sell_commands.router, prefix="/api/v1", tags=["Sell Commands"])
app.include_router(chats.router, prefix="/api/v1", tags=["Chats"])
