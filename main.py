# main.py
from fastapi.middleware.cors import CORSMiddleware
import os
from dotenv import load_dotenv

from fastapi import FastAPI
from api import auth, charts, dashboard, exports, measurements, students
from services.supabase_service import init_supabase_service

# Load environment variables
load_dotenv()

# Initialize FastAPI app
app = FastAPI(
    title="FitTracker Pro Backend",
    description="Student and body-measurement management for personal trainers",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# Initialize services on startup
@app.on_event("startup")
async def startup_event():
    """Initialize services when the app starts"""
    print("🚀 Starting FitTracker Pro Backend...")

    try:
        init_supabase_service()
        print("✅ Supabase service initialized")
        print("🎉 Backend startup complete!")

    except Exception as e:
        print(f"❌ Error during startup: {e}")
        raise

# Include API routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(students.router, prefix="/api/students", tags=["students"])
app.include_router(charts.router, prefix="/api/students", tags=["charts"])
app.include_router(exports.router, prefix="/api/students", tags=["export"])
app.include_router(measurements.router, prefix="/api/measurements", tags=["measurements"])

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "FitTracker Pro Backend API",
        "version": "1.0.0",
        "status": "running",
        "features": ["students", "measurements", "dashboard", "progress_charts", "pdf_export"]
    }

# Health check endpoint
@app.get("/health")
async def health_check():
    from services.supabase_service import get_supabase_service

    try:
        supabase_service = get_supabase_service()
        supabase_health = await supabase_service.health_check()

        return {
            "status": "healthy",
            "services": {
                "api": "healthy",
                "supabase": supabase_health
            },
            "message": "All services are running"
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
            "message": "Some services are down"
        }

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
