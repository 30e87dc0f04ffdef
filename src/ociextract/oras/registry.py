import json
import logging
from enum import Enum, auto
from typing import Optional, Tuple

import jsonschema
import requests
from oras.provider import Registry

from ociextract.exceptions import (
    MissingContentTypeError,
    PlatformNotFoundError,
    ProtocolError,
    TransportError,
    UnexpectedMediaTypeError,
)
from ociextract.oras import schemas
from ociextract.oras.auth import AuthorizationContext
from ociextract.oras.defaults import (
    accepted_manifest_media_types,
    default_platform,
    download_chunk_size,
    index_media_types,
    manifest_media_types,
)
from ociextract.oras.digest import DigestVerifier, is_sha256_digest, verify_sha256
from ociextract.oras.endpoints import RegistryEndpoint
from ociextract.oras.models import ImageIndex, LayerDescriptor, Manifest
from ociextract.oras.reference import ImageReference

logger = logging.getLogger(__name__)


class ResolveState(Enum):
    # a tag may answer with an index or a manifest, an index entry only with a manifest
    EXPECT_EITHER = auto()
    EXPECT_MANIFEST_ONLY = auto()


def get_media_type(response: requests.Response) -> str:
    content_type = response.headers.get("content-type")
    if content_type is None:
        raise MissingContentTypeError(
            f"No 'content-type' header in response: {dict(response.headers)}"
        )
    return content_type.split(";", 1)[0].strip()


def parse_json(data: bytes, source: str) -> dict:
    try:
        document = json.loads(data)
    except ValueError as e:
        raise ProtocolError(f"Response from {source} is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise ProtocolError(f"Response from {source} is not a JSON object")
    return document


def validate_document(document: dict, schema: dict):
    try:
        jsonschema.validate(document, schema=schema)
    except jsonschema.ValidationError as e:
        raise ProtocolError(f"Malformed {schema['title']}: {e.message}") from e


class ExtractRegistry(Registry):
    """
    Read-only registry client. Every request carries the Authorization header
    of the given context, one request is in flight at a time.
    """

    def __init__(
        self,
        authorization: AuthorizationContext,
        insecure: bool = False,
        verify_digests: bool = True,
    ):
        super().__init__(insecure=insecure)
        self.authorization = authorization
        self.verify_digests = verify_digests

    def url_for(
        self, endpoint: RegistryEndpoint, image: ImageReference, ref: Optional[str] = None
    ) -> str:
        return endpoint.url(image, ref, scheme=self.prefix)

    def do_get(self, url: str, accept: str, stream: bool = False) -> requests.Response:
        headers = {"Accept": accept}
        headers.update(self.headers)
        headers.update(self.authorization.headers)
        try:
            response = self.session.get(
                url, headers=headers, stream=stream, allow_redirects=True
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}", url) from e

        if not response.ok:
            response.close()
            raise TransportError(
                f"Issue with {url}: {response.status_code} {response.reason}",
                url,
                response.status_code,
            )
        return response

    def get_manifest_document(
        self, image: ImageReference, ref: Optional[str] = None
    ) -> Tuple[str, dict]:
        """
        Fetch whatever the registry serves for ``ref`` (index or manifest).
        Returns the media type from the content-type header and the decoded body.
        """
        if ref is None:
            ref = image.reference
        url = self.url_for(RegistryEndpoint.MANIFESTS, image, ref)
        response = self.do_get(url, accept=",".join(accepted_manifest_media_types))
        with response:
            media_type = get_media_type(response)
            body = response.content

        if self.verify_digests and is_sha256_digest(ref):
            verify_sha256(ref, body)
        return media_type, parse_json(body, url)

    def resolve(
        self,
        image: ImageReference,
        platform: str = default_platform,
        ref: Optional[str] = None,
        state: ResolveState = ResolveState.EXPECT_EITHER,
    ) -> Manifest:
        """
        Returns the single platform manifest for ``image``.

        If the registry answers with an image index, the first entry whose
        platform renders exactly to ``platform`` is fetched by digest. That
        second request must yield a manifest, a nested index is rejected.
        """
        if ref is None:
            ref = image.reference
        logger.info(f"Getting image manifest for {image.repository}:{ref}...")
        media_type, document = self.get_manifest_document(image, ref)

        if media_type in manifest_media_types:
            logger.info(f"Received manifest. content-type={media_type}")
            validate_document(document, schemas.manifest)
            return Manifest.from_dict(document, media_type)

        if state is ResolveState.EXPECT_EITHER and media_type in index_media_types:
            logger.info("Received OCI index. Looking for image manifest digest...")
            validate_document(document, schemas.index)
            index = ImageIndex.from_dict(document, media_type)
            descriptor = index.find(platform)
            if descriptor is None:
                raise PlatformNotFoundError(platform, index.platforms())
            logger.debug(f"Manifest for {platform}: {descriptor.digest}")
            return self.resolve(
                image,
                platform,
                ref=descriptor.digest,
                state=ResolveState.EXPECT_MANIFEST_ONLY,
            )

        raise UnexpectedMediaTypeError(media_type)

    def fetch_layer(
        self, image: ImageReference, layer: LayerDescriptor, destination: str
    ) -> str:
        """
        Stream the blob of ``layer`` into the file ``destination``.
        """
        url = self.url_for(RegistryEndpoint.BLOBS, image, layer.digest)
        verifier = DigestVerifier(layer.digest) if self.verify_digests else None

        with self.do_get(url, accept=layer.media_type, stream=True) as response:
            with open(destination, "wb") as fp:
                try:
                    for chunk in response.iter_content(chunk_size=download_chunk_size):
                        if not chunk:
                            continue
                        fp.write(chunk)
                        if verifier is not None:
                            verifier.update(chunk)
                except requests.exceptions.RequestException as e:
                    raise TransportError(
                        f"Download of {layer.digest} interrupted: {e}", url
                    ) from e

        if verifier is not None:
            verifier.verify()
        return destination

    def get_tag(self, image: ImageReference, ref: Optional[str] = None) -> dict:
        """Returns the repository tag document served by the TAGS endpoint."""
        url = self.url_for(RegistryEndpoint.TAGS, image, ref)
        with self.do_get(url, accept="application/json") as response:
            return parse_json(response.content, url)
