from collections import Counter

from loguru import logger

from semnav.addressing.normalizer import AddressNormalizer
from semnav.concurrency import ReadWriteLock
from semnav.config import settings
from semnav.domain.address import Address
from semnav.domain.artifact import ArtifactDocument, ArtifactRecord
from semnav.errors import InvalidAddress, RegistryExhausted
from semnav.registry.base import AddressRegistry


class LocalAddressRegistry(AddressRegistry):
    """In-memory registry with a forward (address) and a reverse (source_ref) index."""

    def __init__(
        self,
        normalizer: AddressNormalizer | None = None,
        max_collision_attempts: int | None = None,
    ) -> None:
        """Initialize LocalAddressRegistry.

        Args:
            normalizer: Address normalizer. Defaults to one built from settings.
            max_collision_attempts: Number of suffixes probed before a registration
                     fails with RegistryExhausted.
        """
        self.normalizer = normalizer or AddressNormalizer()
        self.max_collision_attempts = max_collision_attempts or settings.max_collision_attempts
        self._index: dict[Address, ArtifactRecord] = {}
        self._reverse_index: dict[str, Address] = {}
        self._lock = ReadWriteLock()
        self._version = 0

    @classmethod
    def from_records(cls, records: list[ArtifactRecord]) -> "LocalAddressRegistry":
        """Create a registry from already addressed records (useful for testing).

        Records are stored as given; later duplicates of an address are ignored.
        """
        instance = cls()
        for record in records:
            if record.address not in instance._index:
                instance._index[record.address] = record
                instance._reverse_index[record.source_ref] = record.address
        instance._version = 1 if records else 0
        return instance

    @property
    def version(self) -> int:
        return self._version

    @property
    def default_namespace(self) -> str:
        return self.normalizer.default_namespace

    def normalize(self, value: str | Address) -> Address:
        return self.normalizer.normalize(value)

    def register(self, address: str | Address, document: ArtifactDocument) -> Address:
        """Bind a document to an address, disambiguating on collision.

        Args:
            address: Requested address in canonical or short form
            document: Document to register

        Returns:
            The address actually used, e.g. ".../slug-2" after a collision

        Raises:
            InvalidAddress: If the requested address is malformed
            RegistryExhausted: If no free suffix is found within the probe bound
        """
        requested = self.normalize(address)

        with self._lock.write_locked():
            used = requested
            if requested in self._index:
                logger.warning(f"Semantic address collision: {requested.uri}")
                used = self._find_free_address(requested)
                logger.info(f"Resolved collision {requested.uri} -> {used.uri}")

            record = ArtifactRecord(address=used, **document.model_dump(exclude={"address"}))
            self._index[used] = record
            self._reverse_index[record.source_ref] = used
            self._version += 1

        logger.info(f"Registered {record.source_ref} as {used.uri}")
        return used

    def register_document(self, document: ArtifactDocument) -> Address:
        """Register a document under an address generated from its title and type."""
        return self.register(self.normalizer.generate(document.title, document.type), document)

    def _find_free_address(self, address: Address) -> Address:
        """Probe -2, -3, ... for a free slug. Caller must hold the write lock."""
        for counter in range(2, self.max_collision_attempts + 2):
            candidate = self.normalizer.disambiguate(address, counter)
            if candidate not in self._index:
                return candidate
        raise RegistryExhausted(address.uri, self.max_collision_attempts)

    def resolve(self, value: str | Address) -> ArtifactRecord | None:
        """Resolve canonical or short form input to a record. Never raises."""
        try:
            address = self.normalize(value)
        except InvalidAddress as e:
            logger.debug(f"Cannot resolve malformed address: {e}")
            return None

        with self._lock.read_locked():
            return self._index.get(address)

    def reverse_lookup(self, source_ref: str) -> Address | None:
        with self._lock.read_locked():
            return self._reverse_index.get(source_ref)

    def records(self) -> list[ArtifactRecord]:
        with self._lock.read_locked():
            return list(self._index.values())

    def stats(self) -> dict[str, int]:
        """Count of registered artifacts per type, derived from the index."""
        with self._lock.read_locked():
            return dict(Counter(address.type for address in self._index))

    def export_index(self) -> dict:
        """Export the index as plain data. Persisting it is left to the caller."""
        with self._lock.read_locked():
            index = {address.uri: record.model_dump() for address, record in self._index.items()}
            reverse_index = {ref: address.uri for ref, address in self._reverse_index.items()}
            types = dict(Counter(address.type for address in self._index))

        return {
            "namespace": self.default_namespace,
            "index": index,
            "reverse_index": reverse_index,
            "stats": {"total_addresses": len(index), "types": types},
        }

    def clear(self) -> None:
        with self._lock.write_locked():
            self._index.clear()
            self._reverse_index.clear()
            self._version += 1
        logger.info("Address registry cleared")

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._index)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, (str, Address)):
            return False
        return self.resolve(value) is not None
