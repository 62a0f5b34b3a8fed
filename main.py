import os # os needs to be imported before dotenv for getenv to work as expected in some cases
from dotenv import load_dotenv
load_dotenv() # Load .env file at the very beginning

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from shift_tracker.db import init_db, close_db
from shift_tracker.routes import shifts, live, health
from shift_tracker.middleware.error_handler import register_error_handlers
from shift_tracker.utils.ws_manager import manager
import logging


app = FastAPI(
    title="Shift Tracker API",
    description="Personal shift and leave calendar: records, transfers, monthly statistics and a live feed",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

@app.on_event("startup")
async def startup_event():
    logging.info("Application startup completed")

@app.on_event("shutdown")
async def shutdown_event():
    """Close live feeds before the store client goes away"""
    await manager.close_all()
    close_db()
    logging.info("Application shutdown completed")

# Multiple origins can be provided via the CORS_ORIGINS environment variable, comma-separated.
cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:5173")
cors_origins = [origin.strip() for origin in cors_origins_str.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Initialize Database
init_db(app)

app.include_router(health.router, tags=["Health"])
app.include_router(live.router, tags=["Live"])

@app.get("/")
async def root():
    return {
        "message": "Welcome to Shift Tracker API",
        "docs": "/docs",
        "health": "/health",
        "live": "/ws/shifts"
    }

app.include_router(shifts.router, prefix="/api/shifts", tags=["Shifts"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
