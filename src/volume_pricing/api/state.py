"""
Shared service instances for the API routers.

Routers read these through the module (state.engine) so that init_state can
swap them, e.g. to point the app at another data directory.
"""
import logging
from typing import Optional

from ..config.settings import Settings, get_settings
from ..data.catalog import ProductCatalog
from ..engine.pricing_engine import VolumePricingEngine
from ..services.models_service import VolumeModelsService


logger = logging.getLogger(__name__)

settings: Settings = None
models_service: VolumeModelsService = None
catalog: ProductCatalog = None
engine: VolumePricingEngine = None


def shop_from_host(host: Optional[str]) -> str:
    """"acme.myshopify.com" -> "acme"; anything else falls back to the default shop."""
    if host:
        host = host.strip().lower().split(':')[0]
        if host.endswith('.myshopify.com'):
            return host[:-len('.myshopify.com')]
    return settings.default_shop


def init_state(new_settings: Optional[Settings] = None):
    """(Re)build the service instances from settings."""
    global settings, models_service, catalog, engine

    settings = new_settings or get_settings()
    models_service = VolumeModelsService(settings.models_store)
    catalog = ProductCatalog.from_csv(settings.catalog_csv)
    engine = VolumePricingEngine(models_service, catalog)
    logger.info("API state initialised (store=%s, catalog=%d products)", settings.models_store, len(catalog))


init_state()
