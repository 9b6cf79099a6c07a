"""Time adapters."""

from resale_gate.infrastructure.adapters.time.system_time_authority import (
    SystemTimeAuthority,
)

__all__: list[str] = ["SystemTimeAuthority"]
