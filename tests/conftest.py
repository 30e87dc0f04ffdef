import pytest

from helper import FakeSession
from ociextract.oras.auth import AuthorizationContext
from ociextract.oras.reference import ImageReference
from ociextract.oras.registry import ExtractRegistry

BASE_URL = "https://registry.example.com:5000/v2/team/app"


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def registry(session):
    registry = ExtractRegistry(AuthorizationContext.token())
    registry.session = session
    return registry


@pytest.fixture
def image_ref():
    return ImageReference.parse("registry.example.com:5000/team/app:1.0")


@pytest.fixture
def base_url():
    return BASE_URL
