"""Configuration errors raised at startup."""

from resale_gate.domain.exceptions import ResaleGateError


class AdmissionConfigurationError(ResaleGateError):
    """Raised when the admission configuration is inconsistent.

    Startup fails rather than running with a weaker trust level than the
    deployment asked for (e.g. ENFORCED mode without a signing secret).
    """

    pass
