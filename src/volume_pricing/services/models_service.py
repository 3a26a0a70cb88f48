"""
Models Service - CRUD operations for volume pricing models.

Models live in a single JSON file keyed by shop, then model id. Every write
rewrites the file through a temp file + os.replace, so a tier-set
replacement is one atomic swap and readers never see a partial tier set.
"""
import json
import logging
import os
import re
import tempfile
import threading
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from ..engine.formatter import format_summary
from ..engine.models import PricingModel, Tier, ValidationError
from ..engine.validator import validate_model


logger = logging.getLogger(__name__)

STATUS_FILTERS = ('active', 'inactive', 'all')


class ModelNotFoundError(KeyError):
    """No model with that id exists for the shop."""

    def __init__(self, model_id: str):
        super().__init__(model_id)
        self.model_id = model_id

    def __str__(self):
        return f"Volume model '{self.model_id}' not found"


class InvalidModelError(ValueError):
    """A model failed validation and was not saved."""

    def __init__(self, errors: list[ValidationError]):
        super().__init__("; ".join(f"{e.path}: {e.message}" for e in errors))
        self.errors = errors


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class VolumeModelsService:
    """Service for managing volume pricing models for one store file."""

    def __init__(self, store_path: Path):
        self.store_path = store_path
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    def _read_store(self) -> dict:
        if not self.store_path.exists():
            return {"shops": {}}
        with open(self.store_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write_store(self, data: dict):
        """Write the whole store atomically."""
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=self.store_path.name, suffix='.tmp', dir=self.store_path.parent
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.store_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _shop_models(self, data: dict, shop: str) -> dict:
        return data.setdefault("shops", {}).setdefault(shop, {}).setdefault("models", {})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_models(self, shop: str, active: Optional[bool] = None) -> list[PricingModel]:
        """List models for a shop, most recently updated first."""
        with self._lock:
            records = self._shop_models(self._read_store(), shop)
        models = [PricingModel.from_dict(r) for r in records.values()]
        if active is not None:
            models = [m for m in models if m.active == active]
        models.sort(key=lambda m: m.updated_at or '', reverse=True)
        return models

    def search_models(
        self,
        shop: str,
        query: str = '',
        status: str = 'all',
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[PricingModel], int]:
        """
        Filter by name and status, then paginate.

        Returns (page_items, total_matching).
        """
        if status not in STATUS_FILTERS:
            raise ValueError(f"status must be one of {STATUS_FILTERS}")

        active = None if status == 'all' else status == 'active'
        models = self.list_models(shop, active=active)

        if query:
            needle = query.lower()
            models = [m for m in models if needle in m.name.lower()]

        page = max(1, page)
        start = (page - 1) * limit
        return models[start:start + limit], len(models)

    def get_model(self, shop: str, model_id: str) -> PricingModel:
        with self._lock:
            record = self._shop_models(self._read_store(), shop).get(model_id)
        if record is None:
            raise ModelNotFoundError(model_id)
        return PricingModel.from_dict(record)

    def find_model_for_product(self, shop: str, product_id: str) -> Optional[PricingModel]:
        """
        The model a product is associated with, if any.

        An active model wins over inactive ones (a duplicated model shares
        its source's products until one of them is activated).
        """
        matches = [m for m in self.list_models(shop) if product_id in m.product_ids]
        for model in matches:
            if model.active:
                return model
        return matches[0] if matches else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_model(self, shop: str, model: PricingModel) -> PricingModel:
        """Validate and save a new model; returns it with id and timestamps."""
        errors = validate_model(model)
        if errors:
            raise InvalidModelError(errors)

        with self._lock:
            data = self._read_store()
            records = self._shop_models(data, shop)

            model_id = model.id or self._generate_model_id(model.name, records)
            if model_id in records:
                raise ValueError(f"Volume model with ID '{model_id}' already exists")

            created = replace(
                model,
                id=model_id,
                tiers=self._assign_tier_ids(model_id, model.tiers),
                updated_at=_now(),
            )
            if created.active:
                self._claim_products(records, model_id, created.product_ids)
            records[model_id] = created.to_record()
            self._write_store(data)

        logger.info("Created volume model %s for shop %s (%s)", model_id, shop, format_summary(created.tiers))
        return created

    def update_model(self, shop: str, model_id: str, updates: dict) -> PricingModel:
        """
        Apply updates to a model and save it.

        updates may carry name, active, tiers, product_ids and display.
        A tiers value replaces the whole tier set.
        """
        allowed = {'name', 'active', 'tiers', 'product_ids', 'display'}
        unknown = set(updates) - allowed
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self._lock:
            data = self._read_store()
            records = self._shop_models(data, shop)
            if model_id not in records:
                raise ModelNotFoundError(model_id)

            current = PricingModel.from_dict(records[model_id])
            changes = dict(updates)
            if 'tiers' in changes:
                changes['tiers'] = self._assign_tier_ids(model_id, tuple(changes['tiers']))
            updated = replace(current, **changes, updated_at=_now())

            errors = validate_model(updated)
            if errors:
                raise InvalidModelError(errors)

            if updated.active:
                self._claim_products(records, model_id, updated.product_ids)
            records[model_id] = updated.to_record()
            self._write_store(data)

        logger.info("Updated volume model %s for shop %s: %s", model_id, shop, ', '.join(sorted(updates)))
        return updated

    def replace_tiers(self, shop: str, model_id: str, tiers: Iterable[Tier]) -> PricingModel:
        """Swap a model's entire tier set in one write."""
        return self.update_model(shop, model_id, {'tiers': tuple(tiers)})

    def set_active(self, shop: str, model_id: str, active: bool) -> PricingModel:
        return self.update_model(shop, model_id, {'active': active})

    def delete_model(self, shop: str, model_id: str) -> bool:
        with self._lock:
            data = self._read_store()
            records = self._shop_models(data, shop)
            if model_id not in records:
                raise ModelNotFoundError(model_id)
            del records[model_id]
            self._write_store(data)

        logger.info("Deleted volume model %s for shop %s", model_id, shop)
        return True

    def duplicate_model(self, shop: str, model_id: str) -> PricingModel:
        """
        Copy a model as a new inactive model named "<name> (Copy)".

        The copy keeps the source's products; being inactive it takes
        nothing away from the source.
        """
        original = self.get_model(shop, model_id)
        # Tier ids are per model; let the copy get fresh ones
        tiers = tuple(replace(t, id=None) for t in original.tiers)
        copy = replace(original, id='', name=f"{original.name} (Copy)", tiers=tiers, active=False)
        return self.create_model(shop, copy)

    def bulk_apply(self, shop: str, product_ids: list[str], model_id: str, enabled: bool = True) -> int:
        """
        Associate products with a model, or detach them from every model of
        the shop when enabled is False.

        Raises ValueError, leaving the store untouched, when a model would
        be left with no products.
        Returns the number of products affected.
        """
        with self._lock:
            data = self._read_store()
            records = self._shop_models(data, shop)
            if model_id not in records:
                raise ModelNotFoundError(model_id)

            if enabled:
                if records[model_id].get("active"):
                    self._claim_products(records, model_id, product_ids)
                current = records[model_id]["productIds"]
                current.extend(p for p in product_ids if p not in current)
            else:
                self._detach_products(records, list(records), product_ids)

            records[model_id]["updatedAt"] = _now()
            self._write_store(data)

        logger.info(
            "%s %d products %s volume model %s",
            "Applied" if enabled else "Removed", len(product_ids), "to" if enabled else "from", model_id,
        )
        return len(product_ids)

    def get_stats(self, shop: str) -> dict:
        """Get statistics about a shop's models."""
        models = self.list_models(shop)
        active = [m for m in models if m.active]
        by_style = {}
        for m in models:
            by_style[m.display.style.value] = by_style.get(m.display.style.value, 0) + 1

        return {
            'total': len(models),
            'active': len(active),
            'inactive': len(models) - len(active),
            'products': sum(len(m.product_ids) for m in models),
            'by_style': by_style,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _claim_products(self, records: dict, model_id: str, product_ids: Iterable[str]):
        """A product is priced by at most one active model per shop."""
        others = [
            other_id for other_id, record in records.items()
            if other_id != model_id and record.get("active")
        ]
        self._detach_products(records, others, product_ids)

    @staticmethod
    def _detach_products(records: dict, model_ids: list[str], product_ids: Iterable[str]):
        """
        Remove products from the given models.

        Every model must keep at least one product, so nothing is changed
        if any of them would end up empty.
        """
        detach = set(product_ids)
        remaining = {}
        for model_id in model_ids:
            current = records[model_id].get("productIds", [])
            kept = [p for p in current if p not in detach]
            if len(kept) == len(current):
                continue
            if not kept:
                raise ValueError(
                    f"Volume model '{model_id}' would be left with no products; "
                    "deactivate or delete it first"
                )
            remaining[model_id] = kept

        for model_id, kept in remaining.items():
            logger.info("Detaching %d products from model %s",
                        len(records[model_id]["productIds"]) - len(kept), model_id)
            records[model_id]["productIds"] = kept

    @staticmethod
    def _assign_tier_ids(model_id: str, tiers: tuple[Tier, ...]) -> tuple[Tier, ...]:
        taken = {t.id for t in tiers if t.id}
        assigned = []
        counter = 1
        for tier in tiers:
            if not tier.id:
                while f"{model_id}-t{counter}" in taken:
                    counter += 1
                tier = replace(tier, id=f"{model_id}-t{counter}")
                taken.add(tier.id)
            assigned.append(tier)
        return tuple(assigned)

    @staticmethod
    def _generate_model_id(name: str, records: dict) -> str:
        """Generate a unique, readable model ID from its name."""
        base = re.sub(r'[^a-z0-9]+', '-', (name or '').lower()).strip('-')[:24] or 'model'

        candidate = base
        counter = 1
        while candidate in records:
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate
