from enum import Enum
from typing import Optional

import requests

from ociextract.exceptions import InvalidURLError
from ociextract.oras.reference import ImageReference


class RegistryEndpoint(Enum):
    # TAGS is the hub repositories API, not the distribution v2 path shape
    TAGS = "{scheme}://{domain}/v2/repositories/{repository}/tags/{ref}"
    MANIFESTS = "{scheme}://{domain}/v2/{repository}/manifests/{ref}"
    BLOBS = "{scheme}://{domain}/v2/{repository}/blobs/{ref}"

    def url(
        self, image: ImageReference, ref: Optional[str] = None, scheme: str = "https"
    ) -> str:
        """
        Build the API url of this endpoint for ``image``.
        ``ref`` overrides the image's own tag/digest, e.g. a layer digest for BLOBS.
        """
        if ref is None:
            ref = image.reference
        for part, value in (
            ("domain", image.domain),
            ("repository", image.repository),
            ("reference", ref),
        ):
            if not value or any(c.isspace() for c in value):
                raise InvalidURLError(f"Invalid {part} for {self.name} url: '{value}'")

        url = self.value.format(
            scheme=scheme, domain=image.domain, repository=image.repository, ref=ref
        )
        try:
            requests.PreparedRequest().prepare_url(url, None)
        except requests.exceptions.RequestException as e:
            raise InvalidURLError(f"Invalid {self.name} url {url}: {e}") from e
        return url
