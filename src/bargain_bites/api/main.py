"""
FastAPI application for Bargain Bites.

Serves meal plan generation/storage, the user's grocery additions, the
aggregated weekly shopping list, saved preferences and cooking instructions.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from .routes import grocery_list, meal_plans, preferences, recipes, shop

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Bargain Bites API",
    description="Budget meal plans with consolidated, categorized grocery lists",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check():
    """Health check endpoint for load balancers."""
    return {"status": "healthy"}


# Include API routers
app.include_router(meal_plans.router, prefix="/api", tags=["meal-plans"])
app.include_router(grocery_list.router, prefix="/api", tags=["grocery-list"])
app.include_router(shop.router, prefix="/api", tags=["shopping"])
app.include_router(preferences.router, prefix="/api", tags=["preferences"])
app.include_router(recipes.router, prefix="/api", tags=["recipes"])


def run():
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    logger.info(f"Starting {settings.APP_NAME} on port {settings.PORT}")
    uvicorn.run(
        "bargain_bites.api.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
