from __future__ import annotations


class ReadinessError(Exception):
    """A bootstrap stage exhausted its attempts. Always fatal."""

    stage = "readiness"


class ProvisionError(ReadinessError):
    stage = "provisioning"


class ConfirmError(ReadinessError):
    stage = "confirming_topics"


class HealthError(ReadinessError):
    stage = "checking_registry"
