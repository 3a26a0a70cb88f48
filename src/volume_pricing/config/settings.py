"""
Centralized settings and path configuration for the volume pricing service.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Model store (JSON, keyed by shop then model id)
    models_store: Path

    # Read-only product catalog (Product ID, Title, Price)
    catalog_csv: Path

    # Shop used when a request does not identify one
    default_shop: str = 'default'

    log_level: str = 'INFO'
    default_page_size: int = 10

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        data_dir = Path(os.environ.get('VOLUME_PRICING_DATA_DIR', root / 'data'))

        return cls(
            project_root=root,
            data_dir=data_dir,
            models_store=Path(os.environ.get('VOLUME_PRICING_STORE', data_dir / 'volume_models.json')),
            catalog_csv=Path(os.environ.get('VOLUME_PRICING_CATALOG', data_dir / 'products.csv')),
            default_shop=os.environ.get('VOLUME_PRICING_SHOP', 'default'),
            log_level=os.environ.get('VOLUME_PRICING_LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
