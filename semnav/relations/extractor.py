"""Reference and token extraction from artifact content."""

import logging
import re

from semnav.addressing.normalizer import AddressNormalizer
from semnav.domain.address import Address
from semnav.errors import InvalidAddress

logger = logging.getLogger(__name__)

REFERENCE_PATTERN = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]*)?\]\]")
TOKEN_SPLIT_PATTERN = re.compile(r"\W+")


class ReferenceExtractor:
    """Service for extracting bracketed address references and overlap tokens."""

    def __init__(self, normalizer: AddressNormalizer, min_token_length: int = 4):
        self.normalizer = normalizer
        self.min_token_length = min_token_length

    @staticmethod
    def extract_bracketed(content: str) -> list[str]:
        """Extract raw bracketed references.

        Extracts references in the form of [[target]] or [[target|display text]].

        Args:
            content: Text to extract references from

        Returns:
            List of reference targets, stripped of whitespace
        """
        return [match.strip() for match in REFERENCE_PATTERN.findall(content)]

    def extract_references(self, content: str) -> list[tuple[Address, str]]:
        """Extract bracketed references that parse as addresses.

        Args:
            content: Text to extract references from

        Returns:
            List of (address, raw reference) pairs in order of first appearance,
            without duplicate addresses
        """
        references: list[tuple[Address, str]] = []
        seen: set[Address] = set()
        for raw in self.extract_bracketed(content):
            try:
                address = self.normalizer.normalize(raw)
            except InvalidAddress:
                logger.debug(f"Ignoring bracketed text that is not an address: {raw}")
                continue
            if address not in seen:
                seen.add(address)
                references.append((address, raw))
        return references

    def tokenize(self, content: str) -> frozenset[str]:
        """Lowercase word tokens longer than three characters."""
        return frozenset(
            token
            for token in TOKEN_SPLIT_PATTERN.split(content.lower())
            if len(token) >= self.min_token_length
        )
