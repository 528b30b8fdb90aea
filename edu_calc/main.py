import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from edu_calc import config
from edu_calc.api.calculation_api import router as calculation_router
from edu_calc.calculation.calculators.strategy_registry import initialize_calculation_system
from edu_calc.calculation.engine import get_calculation_engine

SERVICE_NAME = "Education Calculator Service"
SERVICE_VERSION = "1.0.0"

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the calculator catalogue before the first request is served."""
    engine = initialize_calculation_system()
    logger.info(f"{SERVICE_NAME} started with {len(engine.get_registered_strategies())} calculators")
    yield
    stats = engine.get_performance_stats()
    logger.info(f"{SERVICE_NAME} stopping after {stats.get('total_operations', 0)} calculations")


app = FastAPI(
    title=SERVICE_NAME,
    description="Step-by-step calculators for mathematics, statistics, finance and physics",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculation_router, prefix="/api/v1/calculators", tags=["Calculators"])


@app.get("/")
async def root():
    return {
        "message": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Healthy once the calculator catalogue is loaded."""
    calculators = len(get_calculation_engine().get_registered_strategies())
    return {
        "status": "healthy" if calculators else "degraded",
        "calculators": calculators
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("edu_calc.main:app", host=config.API_HOST, port=config.API_PORT, reload=False)
