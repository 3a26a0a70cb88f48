"""
Product Catalog - Read-only product id → title/price lookup.

Loads a Shopify-style product export (Product ID, Title, Price) once and
serves lookups from memory. Bare numeric ids are normalised to product GIDs.
"""
import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pandas as pd

from ..engine.models import to_decimal


logger = logging.getLogger(__name__)

GID_PREFIX = 'gid://shopify/Product/'
CATALOG_COLUMNS = ['Product ID', 'Title', 'Price']


def normalize_product_id(product_id) -> str:
    """Turn "123" into "gid://shopify/Product/123"; leave GIDs alone."""
    value = str(product_id).strip()
    if value.isdigit():
        return f"{GID_PREFIX}{value}"
    return value


class ProductCatalog:
    """
    In-memory product catalog.

    Duplicate product ids keep the first row that has a title.
    """

    def __init__(self, products: Optional[pd.DataFrame] = None):
        if products is None:
            products = pd.DataFrame(columns=CATALOG_COLUMNS)

        missing = [c for c in CATALOG_COLUMNS if c not in products.columns]
        if missing:
            raise ValueError(f"Catalog is missing columns: {', '.join(missing)}")

        df = products[CATALOG_COLUMNS].copy()
        df = df.dropna(subset=['Product ID'])
        df['Product ID'] = df['Product ID'].astype(str).map(normalize_product_id)
        df['Title'] = df['Title'].fillna('')

        duplicates = int(df['Product ID'].duplicated().sum())
        if duplicates:
            logger.warning("Dropping %d duplicate product rows from catalog", duplicates)
        df = df.sort_values('Title', ascending=False, kind='stable').drop_duplicates('Product ID')

        self.products = df.set_index('Product ID').sort_index()

    @classmethod
    def from_csv(cls, path: Path) -> 'ProductCatalog':
        """Load the catalog from CSV; a missing file gives an empty catalog."""
        if not path.exists():
            logger.warning("Product catalog not found at %s, starting empty", path)
            return cls()

        df = pd.read_csv(path, dtype={'Product ID': str, 'Price': str})
        logger.info("Loaded %d catalog rows from %s", len(df), path)
        return cls(df)

    @classmethod
    def from_records(cls, records: list[dict]) -> 'ProductCatalog':
        """Build a catalog from dicts with id/title/price keys."""
        df = pd.DataFrame(
            [{'Product ID': r['id'], 'Title': r.get('title', ''), 'Price': r.get('price')} for r in records],
            columns=CATALOG_COLUMNS,
        )
        return cls(df)

    def __len__(self) -> int:
        return len(self.products)

    def __contains__(self, product_id) -> bool:
        return normalize_product_id(product_id) in self.products.index

    def get_product(self, product_id) -> Optional[dict]:
        """Return {id, title, price} or None when the product is unknown."""
        key = normalize_product_id(product_id)
        if key not in self.products.index:
            return None
        row = self.products.loc[key]
        return {"id": key, "title": row['Title'], "price": self._price(row['Price'])}

    def get_price(self, product_id) -> Optional[Decimal]:
        product = self.get_product(product_id)
        return product["price"] if product else None

    def search(self, query: Optional[str] = None, limit: int = 50) -> list[dict]:
        """Products whose id or title contains query (case-insensitive)."""
        df = self.products
        if query:
            mask = (
                df.index.str.contains(query, case=False, na=False, regex=False) |
                df['Title'].str.contains(query, case=False, na=False, regex=False)
            )
            df = df[mask]

        return [
            {"id": product_id, "title": row['Title'], "price": self._price(row['Price'])}
            for product_id, row in df.head(limit).iterrows()
        ]

    @staticmethod
    def _price(value) -> Optional[Decimal]:
        if value is None or pd.isna(value):
            return None
        return to_decimal(value)
