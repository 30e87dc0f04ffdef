import pytest

from ociextract.exceptions import InvalidReferenceError
from ociextract.oras.defaults import default_domain
from ociextract.oras.reference import ImageReference


@pytest.mark.parametrize(
    "image, domain, name, reference",
    [
        ("hello-world", default_domain, "hello-world", "latest"),
        ("hello-world:linux", default_domain, "hello-world", "linux"),
        ("myorg/myimage:v2", default_domain, "myimage", "v2"),
        ("registry.example.com:5000/team/app:1.0", "registry.example.com:5000", "team/app", "1.0"),
        ("registry.example.com:5000/team/app", "registry.example.com:5000", "team/app", "latest"),
        ("localhost/app:dev", "localhost", "app", "dev"),
        ("ghcr.io/org/app@sha256:abc123", "ghcr.io", "org/app", "sha256:abc123"),
        ("ghcr.io/org/app:1.0@sha256:abc123", "ghcr.io", "org/app", "sha256:abc123"),
        ("myorg/myimage:v2@sha256:abc123", "hub.docker.com", "myimage", "sha256:abc123"),
    ],
)
def test_parse(image, domain, name, reference):
    parsed = ImageReference.parse(image)
    assert parsed.domain == domain
    assert parsed.name == name
    assert parsed.reference == reference


@pytest.mark.parametrize("image", ["alpine", "busybox:1.36", "nginx:stable-alpine"])
def test_no_slash_uses_default_registry(image):
    assert ImageReference.parse(image).domain == default_domain


def test_namespace_is_kept_in_repository_path():
    parsed = ImageReference.parse("myorg/myimage:v2")
    assert parsed.namespace == "myorg"
    assert parsed.repository == "myorg/myimage"


def test_port_colon_is_not_a_tag_separator():
    parsed = ImageReference.parse("localhost:5000/app")
    assert parsed.domain == "localhost:5000"
    assert parsed.name == "app"
    assert parsed.reference == "latest"


def test_str():
    assert str(ImageReference.parse("registry.example.com:5000/team/app:1.0")) == (
        "registry.example.com:5000/team/app:1.0"
    )
    assert str(ImageReference.parse("ghcr.io/org/app@sha256:abc")) == (
        "ghcr.io/org/app@sha256:abc"
    )


def test_reference_is_immutable():
    parsed = ImageReference.parse("hello-world")
    with pytest.raises(AttributeError):
        parsed.reference = "other"


@pytest.mark.parametrize(
    "image", ["", "   ", "registry.example.com/", "app:", "registry.example.com/:tag"]
)
def test_parse_invalid(image):
    with pytest.raises(InvalidReferenceError):
        ImageReference.parse(image)
