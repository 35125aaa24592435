"""Address domain model."""

from pydantic import BaseModel, Field

TAG = r"[a-z][a-z0-9_-]*"
NAMESPACE = r"[a-z0-9][a-z0-9_-]*"
SLUG = r"[a-z0-9]+(?:-[a-z0-9]+)*"


class Address(BaseModel):
    """Canonical symbolic identifier for an artifact.

    Instances are produced by the normalizer and never mutated afterwards.
    Two addresses are equal iff their (namespace, type, slug) triples are equal.

    Attributes:
        namespace: Lowercase namespace tag, e.g. "vault"
        type: Lowercase free-form type tag, e.g. "skill"
        slug: Lowercase hyphen-separated identifier
    """

    namespace: str = Field(pattern=rf"^{NAMESPACE}$")
    type: str = Field(pattern=rf"^{TAG}$")
    slug: str = Field(pattern=rf"^{SLUG}$")

    model_config = {"frozen": True}

    @property
    def uri(self) -> str:
        """Canonical long form: namespace://type/slug."""
        return f"{self.namespace}://{self.type}/{self.slug}"

    @property
    def short(self) -> str:
        """Short form: type:slug (only meaningful within the default namespace)."""
        return f"{self.type}:{self.slug}"

    def with_slug(self, slug: str) -> "Address":
        return Address(namespace=self.namespace, type=self.type, slug=slug)

    def __str__(self) -> str:
        return self.uri
