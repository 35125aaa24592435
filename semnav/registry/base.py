from typing import Protocol

from semnav.addressing.normalizer import AddressNormalizer
from semnav.domain.address import Address
from semnav.domain.artifact import ArtifactDocument, ArtifactRecord


class AddressRegistry(Protocol):
    normalizer: AddressNormalizer

    @property
    def version(self) -> int:
        """Counter incremented on every mutation of the registry."""
        ...

    def normalize(self, value: str | Address) -> Address:
        """Normalize an address in canonical or short form."""
        ...

    def register(self, address: str | Address, document: ArtifactDocument) -> Address:
        """Register a document, returning the (possibly disambiguated) address used."""
        ...

    def register_document(self, document: ArtifactDocument) -> Address:
        """Register a document under an address generated from its title and type."""
        ...

    def resolve(self, value: str | Address) -> ArtifactRecord | None:
        """Resolve an address to its record, or None if it is not registered."""
        ...

    def reverse_lookup(self, source_ref: str) -> Address | None:
        """Get the address registered for a source reference."""
        ...

    def records(self) -> list[ArtifactRecord]:
        """Snapshot of all records in registration order."""
        ...

    def stats(self) -> dict[str, int]:
        """Count of registered artifacts per type."""
        ...

    def clear(self) -> None:
        """Remove all registered artifacts."""
        ...

    def __len__(self) -> int: ...

    def __contains__(self, value: object) -> bool: ...
