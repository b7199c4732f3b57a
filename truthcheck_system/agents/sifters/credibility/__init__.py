"""Source categorization for web evidence.

- DomainBiasResolver: exact-then-parent domain -> political lean lookup
"""

from truthcheck_system.agents.sifters.credibility.bias_resolver import (
    DomainBiasResolver,
    normalize_host,
    parent_domain,
)

__all__ = ["DomainBiasResolver", "normalize_host", "parent_domain"]
