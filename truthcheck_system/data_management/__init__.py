"""Data management package for the trust-scoring system.

Provides the shared cache and the schemas for:
- Claims (Claim, ClassifiedClaim) - immutable extraction output
- Scored claims (ScoredClaim) - terminal records with signals and sources

Storage adapters:
- TTLCache: process-wide key/value cache with per-entry expiry
"""

from truthcheck_system.data_management.cache import TTLCache, make_cache_key

__all__ = [
    "TTLCache",
    "make_cache_key",
]
