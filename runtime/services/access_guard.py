"""AccessGuard: the single shared admin password.

Every mutating route checks the password field of the request through
`require()` before touching the store or the upload directories.

This is a plain equality check against one configured secret, not per-user
authentication. When no secret is configured, nothing is authorized.
"""

import logging
from typing import Optional

from exceptions.exceptions import Unauthorized


logger = logging.getLogger(__name__)


class AccessGuard:
    """Validate a caller-supplied secret against the configured one.

    Parameters
    ----------
    secret:
        The admin password. `None` or an empty string disables all
        mutations.
    """

    def __init__(self, secret: Optional[str]) -> None:
        self._secret = secret or None
        if self._secret is None:
            logger.warning("[AUTH] No admin password configured; admin actions are disabled")

    def authorize(self, supplied_secret: Optional[str]) -> bool:
        if self._secret is None or supplied_secret is None:
            return False
        return supplied_secret == self._secret

    def require(self, supplied_secret: Optional[str]) -> None:
        """Raise Unauthorized unless `supplied_secret` matches exactly."""
        if not self.authorize(supplied_secret):
            logger.warning("[AUTH] Rejected admin request (password %s)",
                           "missing" if not supplied_secret else "mismatch")
            raise Unauthorized()
