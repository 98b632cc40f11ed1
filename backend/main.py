"""
KekeLink Backend - FastAPI Entry Point
Main application file with CORS, middleware, route and WebSocket hub registration
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import connect_db, disconnect_db
from logging_config import setup_logging
from routes import admin_routes, auth_routes, report_routes, trip_routes
from sockets import hub_socket
from sockets.hub_socket import ConnectionManager

setup_logging()
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the API with a fresh WebSocket hub"""
    app = FastAPI(
        title="KekeLink API",
        description="Backend API and real-time safety hub for KekeLink keke rides",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Hub state is per application instance
    app.state.manager = ConnectionManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests with timing"""
        start_time = time.time()

        logger.info(f"Request: {request.method} {request.url.path}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(f"Completed in {process_time:.2f}s - Status: {response.status_code}")

        return response

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions"""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Internal server error",
                "error": str(exc),
            },
        )

    # Database connection events
    @app.on_event("startup")
    async def startup_event():
        """Connect to MongoDB on startup"""
        logger.info("Starting KekeLink API...")
        connect_db()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Disconnect from MongoDB on shutdown"""
        logger.info("Shutting down KekeLink API...")
        disconnect_db()

    # Health check endpoint
    @app.get("/")
    async def root():
        """API health check"""
        return {"success": True, "message": "KekeLink API is running", "version": "1.0.0"}

    @app.get("/health")
    async def health_check():
        """Detailed health check"""
        stats = app.state.manager.get_stats()
        return {
            "success": True,
            "status": "healthy",
            "active_connections": stats["active_connections"],
        }

    # Register route modules
    app.include_router(auth_routes.router, prefix="/api", tags=["Authentication"])
    app.include_router(report_routes.router, prefix="/api", tags=["Reports"])
    app.include_router(trip_routes.router, prefix="/api", tags=["Trips"])
    app.include_router(admin_routes.router, prefix="/api/admin", tags=["Admin"])

    # Register WebSocket hub
    app.include_router(hub_socket.router, tags=["WebSocket"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
