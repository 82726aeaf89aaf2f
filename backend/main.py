"""
LEARNING NOTE: Entry point de la aplicación
Aquí se configura todo FastAPI
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging
import time
from contextlib import asynccontextmanager
from backend.core.config import settings
from backend.api.v1.endpoints import placements, predictions

# Configurar logging
logging.basicConfig(
    level=logging.INFO if not settings.debug_mode else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    LEARNING NOTE: Lifespan context manager
    Código que ejecuta al iniciar/apagar la app
    """
    # Startup
    logger.info("Starting Placement Trend Forecaster API")
    logger.info(f"Debug mode: {settings.debug_mode}")
    logger.info(
        f"Network: 3 -> {settings.hidden_size_1} -> {settings.hidden_size_2} -> 1, "
        f"{settings.training_epochs} epochs, lr={settings.learning_rate}"
    )

    yield

    # Shutdown
    logger.info("Shutting down Placement Trend Forecaster API")

# Crear aplicación
app = FastAPI(
    title="Placement Trend Forecaster API",
    description="Placement counts per year with neural-network forecasting",
    version=settings.api_version,
    lifespan=lifespan
)

# LEARNING NOTE: Middleware custom para logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log todas las requests"""

    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response: {response.status_code} - Time: {process_time:.3f}s")

    response.headers["X-Process-Time"] = str(process_time)

    return response

# LEARNING NOTE: Exception handler global
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Maneja excepciones no capturadas"""

    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error": str(exc) if settings.debug_mode else "An error occurred"
        }
    )

# Incluir routers
app.include_router(
    placements.router,
    prefix=f"/api/{settings.api_version}"
)

app.include_router(
    predictions.router,
    prefix=f"/api/{settings.api_version}"
)

# Root endpoint
@app.get("/")
async def root():
    """Health check básico"""
    return {
        "service": "Placement Trend Forecaster API",
        "version": settings.api_version,
        "status": "operational"
    }

@app.get(f"/api/{settings.api_version}/health")
async def health_check():
    """
    Health check detallado

    LEARNING NOTE: Importante para Kubernetes/Cloud Run
    """

    return {
        "status": "healthy",
        "version": settings.api_version,
        "checks": {
            "api": "operational",
        }
    }

if __name__ == "__main__":
    import uvicorn

    # LEARNING NOTE: Solo para desarrollo local
    # En producción usa: uvicorn backend.main:app

    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug_mode,
        log_level="info" if not settings.debug_mode else "debug"
    )
