import sys
import os
from decimal import Decimal

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from volume_pricing.config.settings import Settings
from volume_pricing.data.catalog import ProductCatalog
from volume_pricing.engine.models import DiscountType, PricingModel, Tier
from volume_pricing.services.models_service import VolumeModelsService


TEE = "gid://shopify/Product/1001"
MUG = "gid://shopify/Product/1002"
PIN = "gid://shopify/Product/1003"


def make_tier(min_qty, max_qty=None, discount_type=DiscountType.PERCENT, value="10", tier_id=None):
    return Tier(
        id=tier_id,
        min_qty=min_qty,
        max_qty=max_qty,
        discount_type=discount_type,
        discount_value=None if value is None else Decimal(value),
    )


@pytest.fixture
def example_tiers():
    """5-9 → 10% off; 10+ → 15% off"""
    return (
        make_tier(5, 9, DiscountType.PERCENT, "10"),
        make_tier(10, None, DiscountType.PERCENT, "15"),
    )


@pytest.fixture
def catalog():
    return ProductCatalog.from_records([
        {"id": "1001", "title": "Classic Cotton Tee", "price": "29.99"},
        {"id": "1002", "title": "Ceramic Mug", "price": "12.00"},
        {"id": "1003", "title": "Enamel Pin", "price": "0"},
    ])


@pytest.fixture
def service(tmp_path):
    return VolumeModelsService(tmp_path / "store" / "volume_models.json")


@pytest.fixture
def tee_model(example_tiers):
    return PricingModel(id="", name="Apparel Bulk", product_ids=[TEE], tiers=example_tiers, active=True)


@pytest.fixture
def settings(tmp_path):
    catalog_csv = tmp_path / "products.csv"
    catalog_csv.write_text(
        "Product ID,Title,Price\n"
        "1001,Classic Cotton Tee,29.99\n"
        "1002,Ceramic Mug,12.00\n",
        encoding="utf-8",
    )
    return Settings(
        project_root=tmp_path,
        data_dir=tmp_path,
        models_store=tmp_path / "volume_models.json",
        catalog_csv=catalog_csv,
        default_shop="test-shop",
    )
