"""Listing admission API dependencies.

Thin providers over the bootstrap singletons so routes can be overridden
with ``app.dependency_overrides`` in tests.
"""

from resale_gate.application.services.listing_admission_service import (
    ListingAdmissionService,
)
from resale_gate.bootstrap import listing_admission as bootstrap
from resale_gate.config.admission_config import AdmissionConfig


def get_listing_admission_service() -> ListingAdmissionService:
    """Get the listing admission service singleton."""
    return bootstrap.get_listing_admission_service()


def get_admission_config() -> AdmissionConfig:
    """Get the admission configuration singleton."""
    return bootstrap.get_admission_config()
