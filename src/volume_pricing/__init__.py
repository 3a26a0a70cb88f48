"""
Volume Pricing Package

Quantity-tiered discount pricing for storefront products.
Validates tier sets, resolves the tier for a purchased quantity,
prices it, and renders tier summaries.
"""

__version__ = "1.0.0"
