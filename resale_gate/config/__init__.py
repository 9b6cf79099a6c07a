"""Configuration for the listing admission engine."""

from resale_gate.config.admission_config import (
    DEFAULT_ADMISSION_CONFIG,
    MAX_NOTES_LENGTH,
    MAX_PROOF_TEXT_LENGTH,
    MIN_UNSTRUCTURED_PROOF_LENGTH,
    TEST_ADMISSION_CONFIG,
    TEST_SIGNING_SECRET,
    AdmissionConfig,
)

__all__: list[str] = [
    "AdmissionConfig",
    "DEFAULT_ADMISSION_CONFIG",
    "MAX_NOTES_LENGTH",
    "MAX_PROOF_TEXT_LENGTH",
    "MIN_UNSTRUCTURED_PROOF_LENGTH",
    "TEST_ADMISSION_CONFIG",
    "TEST_SIGNING_SECRET",
]
