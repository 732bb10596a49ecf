import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .catalog import SHAPE_CATALOG, check_catalog
from .config import settings
from .routers import formulas, materials, shapes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("shape_engine")

app = FastAPI(
    title=settings.APP_NAME,
    description="Parametric shape weight and cost calculation for fabricated equipment",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(shapes.router, prefix="/api")
app.include_router(formulas.router, prefix="/api")
app.include_router(materials.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "shape-engine", "shapes": len(SHAPE_CATALOG)}


@app.on_event("startup")
def verify_catalog():
    """Log authoring problems in the shape catalog. Never blocks startup."""
    problems = check_catalog()
    for shape_name, issues in problems.items():
        for issue in issues:
            logger.warning(f"Catalog: {shape_name}: {issue}")
    logger.info(f"Catalog ready: {len(SHAPE_CATALOG)} shapes, {len(problems)} with problems")
