"""Pricing request orchestration.

The pricing service itself is external. This module flattens pieces into
the payload the service expects and sequences a quote through the
calculation commands, so a late response to an older request can never
overwrite the result of a newer one.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence, runtime_checkable

from encimeras.domain.catalogs import CategoryLookup
from encimeras.domain.commands import (
    CalculationError,
    CalculationStart,
    CalculationSuccess,
)
from encimeras.domain.entities import CalculationStatus, Piece
from encimeras.domain.services.assembly_validator import validate_assemblies

from .session import ProjectSession

logger = logging.getLogger(__name__)

EMPTY_PROJECT_MESSAGE = "The project has no pieces to price"


class PricingError(Exception):
    """Raised by pricing services when a quote cannot be produced."""


@runtime_checkable
class PricingService(Protocol):
    """Protocol for the external pricing backend.

    Example:
        ```python
        class FixedPricing:
            def calculate(self, pieces: list[dict[str, Any]]) -> dict[str, Any]:
                return {"total": 100.0}
        ```
    """

    def calculate(self, pieces: list[dict[str, Any]]) -> Any:
        """Price the flattened pieces.

        Raises:
            PricingError: If the backend refuses or fails the request.
        """
        ...


def to_pricing_payload(pieces: Sequence[Piece]) -> list[dict[str, Any]]:
    """Flatten pieces into the pricing request format.

    Example:
        >>> to_pricing_payload([piece])  # doctest: +SKIP
        [{'id': 'piece-1', 'materialId': 'HPL', 'selectedAttributes': {},
          'length_mm': 2000, 'width_mm': 600, 'appliedAddons': []}]
    """
    return [
        {
            "id": piece.id,
            "materialId": piece.material_id,
            "selectedAttributes": dict(piece.selected_attributes),
            "length_mm": piece.measurements.length_mm,
            "width_mm": piece.measurements.width_mm,
            "appliedAddons": [
                {
                    "code": addon.code,
                    "measurements": dict(addon.measurements),
                    "quantity": addon.quantity,
                }
                for addon in piece.applied_addons
            ],
        }
        for piece in pieces
    ]


class QuoteCalculator:
    """Runs a quote for the project held by a session."""

    def __init__(self, pricing_service: PricingService, category_of: CategoryLookup) -> None:
        self.pricing_service = pricing_service
        self.category_of = category_of

    def calculate(self, session: ProjectSession) -> CalculationStatus:
        """Request a price and record the outcome in the session.

        Returns:
            The session's calculation status after the request.
        """
        session.dispatch(CalculationStart())
        token = session.state.calculation.token

        pieces = session.state.pieces
        if not pieces:
            session.dispatch(CalculationError(token=token, message=EMPTY_PROJECT_MESSAGE))
            return session.state.calculation

        validation = validate_assemblies(pieces, self.category_of)
        if not validation.valid:
            session.dispatch(CalculationError(token=token, message=validation.message or ""))
            return session.state.calculation

        try:
            result = self.pricing_service.calculate(to_pricing_payload(pieces))
        except PricingError as e:
            logger.warning(f"Pricing request {token} failed: {e}")
            session.dispatch(CalculationError(token=token, message=str(e)))
            return session.state.calculation
        except Exception as e:
            logger.exception(f"Pricing request {token} raised {type(e).__name__}")
            session.dispatch(
                CalculationError(token=token, message=str(e) or type(e).__name__)
            )
            return session.state.calculation

        session.dispatch(CalculationSuccess(token=token, result=result))
        return session.state.calculation
