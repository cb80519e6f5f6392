"""Pydantic models for the aggregator HTTP API."""

from aggregator.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = ["Address", "Uint256", "is_valid_address", "normalize_address"]
