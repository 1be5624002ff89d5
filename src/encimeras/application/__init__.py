"""Application layer - sessions, project files and pricing."""

from .pricing import PricingError, PricingService, QuoteCalculator, to_pricing_payload
from .session import ProjectSession, assign_junction_assembly

__all__ = [
    "PricingError",
    "PricingService",
    "ProjectSession",
    "QuoteCalculator",
    "assign_junction_assembly",
    "to_pricing_payload",
]
