import hashlib
import io
import json
import tarfile

from requests.structures import CaseInsensitiveDict

OCI_INDEX = "application/vnd.oci.image.index.v1+json"
OCI_MANIFEST = "application/vnd.oci.image.manifest.v1+json"
DOCKER_MANIFEST = "application/vnd.docker.distribution.manifest.v2+json"
LAYER_MEDIA_TYPE = "application/vnd.oci.image.layer.v1.tar+gzip"


def sha256_digest(data: bytes) -> str:
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def make_layer_archive(files: dict) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def make_manifest(layer_blobs, media_type=OCI_MANIFEST) -> dict:
    config = b'{"architecture": "amd64", "os": "linux"}'
    return {
        "schemaVersion": 2,
        "mediaType": media_type,
        "config": {
            "mediaType": "application/vnd.oci.image.config.v1+json",
            "digest": sha256_digest(config),
            "size": len(config),
        },
        "layers": [
            {
                "mediaType": LAYER_MEDIA_TYPE,
                "digest": sha256_digest(blob),
                "size": len(blob),
            }
            for blob in layer_blobs
        ],
    }


def make_index(entries) -> dict:
    """entries: list of (platform dict, manifest bytes)"""
    return {
        "schemaVersion": 2,
        "mediaType": OCI_INDEX,
        "manifests": [
            {
                "mediaType": OCI_MANIFEST,
                "digest": sha256_digest(body),
                "size": len(body),
                "platform": platform,
            }
            for platform, body in entries
        ],
    }


def encode(document: dict) -> bytes:
    return json.dumps(document).encode("utf-8")


class FakeResponse:
    def __init__(self, status_code=200, content=b"", headers=None, reason="OK"):
        self.status_code = status_code
        self.content = content
        self.headers = CaseInsensitiveDict(headers or {})
        self.reason = reason
        self.closed = False

    @property
    def ok(self):
        return self.status_code < 400

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class FakeSession:
    """Serves canned responses by url and records every request."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def add(self, url, response):
        self.routes[url] = response

    def add_document(self, url, body: bytes, media_type):
        headers = {"content-type": media_type} if media_type else {}
        self.add(url, FakeResponse(content=body, headers=headers))

    def get(self, url, headers=None, stream=False, allow_redirects=True):
        self.requests.append({"url": url, "headers": dict(headers or {}), "stream": stream})
        if url not in self.routes:
            return FakeResponse(status_code=404, reason="Not Found")
        return self.routes[url]

    def urls(self):
        return [request["url"] for request in self.requests]


class RecordingExtractor:
    def __init__(self, exit_codes=None):
        self.exit_codes = list(exit_codes or [])
        self.calls = []
        self.archives = []

    def __call__(self, archive, destination):
        with open(archive, "rb") as f:
            self.archives.append(f.read())
        self.calls.append((archive, destination))
        if self.exit_codes:
            return self.exit_codes.pop(0)
        return 0
