"""
Storefront checkout service.

Order assembly, pricing and inventory reservation for the storefront.
"""

__version__ = "0.1.0"
