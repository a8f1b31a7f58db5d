"""
Validator services for validating business rules and data integrity.
"""

from .order_validator import OrderValidator

__all__ = ["OrderValidator"]
