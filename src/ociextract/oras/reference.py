from dataclasses import dataclass

from ociextract.exceptions import InvalidReferenceError
from ociextract.oras.defaults import default_domain, default_tag


def looks_like_registry_host(segment: str) -> bool:
    """
    A leading path segment names a registry when it carries a dot or a port,
    or is localhost. Anything else (e.g. "myorg") is a repository namespace.
    """
    return "." in segment or ":" in segment or segment == "localhost"


@dataclass(frozen=True)
class ImageReference:
    """
    A parsed image string.

    ``name`` is the repository name without the namespace segment, ``repository``
    is the path used in registry API URLs.
    """

    domain: str
    name: str
    reference: str = default_tag
    namespace: str = ""

    @property
    def repository(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    @property
    def is_digest(self) -> bool:
        return ":" in self.reference

    def __str__(self) -> str:
        separator = "@" if self.is_digest else ":"
        return f"{self.domain}/{self.repository}{separator}{self.reference}"

    @classmethod
    def parse(cls, image: str) -> "ImageReference":
        """
        Parse ``image`` into domain, name and reference.

        hello-world                          -> hub.docker.com, hello-world, latest
        myorg/myimage:v2                     -> hub.docker.com, myimage, v2 (namespace myorg)
        registry.example.com:5000/team/app:1 -> registry.example.com:5000, team/app, 1
        ghcr.io/org/app@sha256:ab12...       -> ghcr.io, org/app, sha256:ab12...
        ghcr.io/org/app:1.0@sha256:ab12...   -> ghcr.io, org/app, sha256:ab12...

        The tag separator is searched only after the first slash, so a port
        in the domain is never read as a tag.
        """
        image = image.strip() if image else ""
        if not image:
            raise InvalidReferenceError("Image reference is empty")

        domain = default_domain
        namespace = ""
        remainder = image

        slash_index = image.find("/")
        if slash_index >= 0:
            head = image[:slash_index]
            remainder = image[slash_index + 1 :]
            if looks_like_registry_host(head):
                domain = head
            else:
                namespace = head

        at_index = remainder.find("@")
        colon_index = remainder.find(":")
        if at_index >= 0:
            name, reference = remainder[:at_index], remainder[at_index + 1 :]
            # name:tag@digest, the digest wins
            name = name.split(":", 1)[0]
        elif colon_index >= 0:
            name, reference = remainder[:colon_index], remainder[colon_index + 1 :]
        else:
            name, reference = remainder, default_tag

        if not name:
            raise InvalidReferenceError(f"No repository name in image reference '{image}'")
        if not reference:
            raise InvalidReferenceError(f"Empty tag or digest in image reference '{image}'")

        return cls(domain=domain, name=name, reference=reference, namespace=namespace)
