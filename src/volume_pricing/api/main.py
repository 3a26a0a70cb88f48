import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from volume_pricing import __version__
from volume_pricing.api import state
from volume_pricing.api.models_api import router as models_router
from volume_pricing.api.display_api import router as display_router

logging.basicConfig(
    level=state.settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Volume Pricing API",
    description="Tiered quantity discounts: model management and storefront display",
    version=__version__
)

# Storefront script is served from the shop's own domain
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(models_router)
app.include_router(display_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "Volume Pricing API Active"}


@app.get("/system/status")
async def get_status():
    settings = state.settings
    return {
        "engine_active": True,
        "catalog_products": len(state.catalog),
        "models_store": str(settings.models_store),
        "store_exists": settings.models_store.exists(),
        "default_shop": settings.default_shop,
    }
