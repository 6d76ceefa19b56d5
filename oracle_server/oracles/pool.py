"""
Identity pool for registered oracles.

Written once during registration, then sealed and read-only.
"""

from oracle_server.errors import PoolSealedError
from oracle_server.schemas.oracle import OracleIdentity


class IdentityPool:
    """Owns every registered OracleIdentity, in registration order."""

    def __init__(self):
        self._identities: list[OracleIdentity] = []
        self._addresses: set[str] = set()
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def add(self, identity: OracleIdentity) -> None:
        """
        Append a newly registered identity.

        Raises:
            PoolSealedError: registration has already completed
            ValueError: an identity with the same address is already pooled
        """
        if self._sealed:
            raise PoolSealedError(f"cannot add {identity.address}: pool is sealed")
        if identity.address in self._addresses:
            raise ValueError(f"oracle {identity.address} is already registered")
        self._identities.append(identity)
        self._addresses.add(identity.address)

    def seal(self) -> None:
        """Mark registration complete; identities become eligible for dispatch."""
        self._sealed = True

    def size(self) -> int:
        return len(self._identities)

    def all(self) -> tuple[OracleIdentity, ...]:
        return tuple(self._identities)

    def matching(self, target_index: int) -> tuple[OracleIdentity, ...]:
        """
        Identities holding `target_index` among their 3 indexes.

        Each identity appears at most once, in registration order. Nothing is
        eligible until the pool is sealed.
        """
        if not self._sealed:
            return ()
        return tuple(identity for identity in self._identities if identity.holds(target_index))

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, address: str) -> bool:
        return address in self._addresses
