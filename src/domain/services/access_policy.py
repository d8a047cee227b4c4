"""Access policy for the privileged content override."""


class AdminAccessPolicy:
    """Grants the privileged override to a single configured identity."""

    def __init__(self, admin_identity: str) -> None:
        self._admin_identity = admin_identity

    def is_privileged(self, identity: str | None) -> bool:
        """Check whether ``identity`` is the admin. An unset admin matches nobody."""
        return bool(self._admin_identity) and identity == self._admin_identity
