"""Address grammar, slug creation and address generation."""

import re
from typing import Callable

from loguru import logger

from semnav.config import settings
from semnav.domain.address import NAMESPACE, SLUG, TAG, Address
from semnav.errors import InvalidAddress

LEGACY_PATTERN = re.compile(rf"^sem://({NAMESPACE})/({TAG})/({SLUG})$")
CANONICAL_PATTERN = re.compile(rf"^({NAMESPACE})://({TAG})/({SLUG})$")
SHORT_PATTERN = re.compile(rf"^({TAG}):({SLUG})$")

ONTOLOGY_TYPES = {
    "Person": "person",
    "Concept": "concept",
    "Project": "project",
    "Task": "task",
    "Meeting": "meeting",
    "Research": "research",
    "Goal": "goal",
}


class AddressNormalizer:
    """Parse and generate addresses with clear precedence rules."""

    def __init__(
        self,
        default_namespace: str | None = None,
        max_slug_length: int | None = None,
    ):
        """
        Initialize AddressNormalizer.

        Args:
            default_namespace: Namespace used to expand short forms (e.g. "vault")
            max_slug_length: Maximum slug length after normalization
        """
        self.default_namespace = default_namespace or settings.default_namespace
        self.max_slug_length = max_slug_length or settings.max_slug_length

    def normalize(self, value: str | Address) -> Address:
        """
        Normalize an address in any accepted form to its canonical triple.

        Accepted forms, tried in order:
        1. Legacy URI (sem://namespace/type/slug)
        2. Canonical URI (namespace://type/slug)
        3. Short form (type:slug), expanded with the default namespace

        Args:
            value: Address text or an Address, whose slug length is checked again

        Returns:
            The canonical Address

        Raises:
            InvalidAddress: If the input matches none of the grammars
        """
        if isinstance(value, Address):
            return self._check_length(value.uri, value)
        if not isinstance(value, str):
            raise InvalidAddress(repr(value), "not a string")

        clean = value.strip().lower()
        parse_strategies: list[tuple[str, Callable[[str], Address | None]]] = [
            ("legacy uri", self._parse_legacy),
            ("canonical uri", self._parse_canonical),
            ("short form", self._parse_short),
        ]

        for strategy_name, parser in parse_strategies:
            address = parser(clean)
            if address is not None:
                logger.debug(f"Parsed {value!r} as {strategy_name}: {address.uri}")
                return self._check_length(value, address)

        raise InvalidAddress(value, "expected namespace://type/slug or type:slug")

    def is_valid(self, value: str) -> bool:
        try:
            self.normalize(value)
        except InvalidAddress:
            return False
        return True

    def _parse_legacy(self, value: str) -> Address | None:
        match = LEGACY_PATTERN.match(value)
        if not match:
            return None
        return Address(namespace=match.group(1), type=match.group(2), slug=match.group(3))

    def _parse_canonical(self, value: str) -> Address | None:
        match = CANONICAL_PATTERN.match(value)
        if not match:
            return None
        return Address(namespace=match.group(1), type=match.group(2), slug=match.group(3))

    def _parse_short(self, value: str) -> Address | None:
        match = SHORT_PATTERN.match(value)
        if not match:
            return None
        return Address(namespace=self.default_namespace, type=match.group(1), slug=match.group(2))

    def _check_length(self, value: str, address: Address) -> Address:
        if len(address.slug) > self.max_slug_length:
            raise InvalidAddress(value, f"slug longer than {self.max_slug_length} characters")
        return address

    def slugify(self, title: str) -> str:
        """Create a URL-safe slug from a title.

        Args:
            title: Free-form title

        Returns:
            Lowercase hyphen-separated slug, at most max_slug_length characters

        Raises:
            InvalidAddress: If nothing usable remains after cleaning
        """
        slug = title.lower()
        slug = re.sub(r"[^a-z0-9\s-]", "", slug)
        slug = re.sub(r"\s+", "-", slug)
        slug = re.sub(r"-+", "-", slug).strip("-")
        slug = slug[: self.max_slug_length].strip("-")
        if not slug:
            raise InvalidAddress(title, "title produces an empty slug")
        return slug

    def generate(self, title: str, artifact_type: str = "note") -> Address:
        """Generate an address from a title and a type."""
        artifact_type = artifact_type.strip().lower()
        if not re.fullmatch(TAG, artifact_type):
            raise InvalidAddress(artifact_type, "invalid type tag")
        return Address(
            namespace=self.default_namespace, type=artifact_type, slug=self.slugify(title)
        )

    def generate_ontology_address(self, title: str, ontology_type: str) -> Address:
        """Generate an address from an ontology class name such as "Person" or "Goal"."""
        return self.generate(title, ONTOLOGY_TYPES.get(ontology_type, "note"))

    def disambiguate(self, address: Address, counter: int) -> Address:
        """Append a numeric suffix, shortening the base slug to keep the length bound."""
        suffix = f"-{counter}"
        base = address.slug[: self.max_slug_length - len(suffix)].rstrip("-")
        return address.with_slug(f"{base}{suffix}")
