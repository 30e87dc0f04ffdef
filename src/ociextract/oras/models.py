from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Platform:
    os: str
    architecture: str
    variant: str = ""

    def __str__(self) -> str:
        platform = f"{self.os}/{self.architecture}"
        if self.variant:
            platform += f"/{self.variant}"
        return platform

    @classmethod
    def from_dict(cls, data: dict) -> "Platform":
        return cls(
            os=data.get("os", ""),
            architecture=data.get("architecture", ""),
            variant=data.get("variant", "") or "",
        )


@dataclass(frozen=True)
class LayerDescriptor:
    media_type: str
    digest: str
    size: int

    @property
    def size_mb(self) -> int:
        return self.size // (1024 * 1024)

    @classmethod
    def from_dict(cls, data: dict) -> "LayerDescriptor":
        return cls(
            media_type=data["mediaType"], digest=data["digest"], size=int(data["size"])
        )

    def to_dict(self) -> dict:
        return {"mediaType": self.media_type, "digest": self.digest, "size": self.size}


@dataclass(frozen=True)
class ManifestDescriptor:
    """An entry of an image index pointing at a platform specific manifest."""

    media_type: str
    digest: str
    size: int
    platform: Optional[Platform] = None
    annotations: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "ManifestDescriptor":
        platform = data.get("platform")
        return cls(
            media_type=data.get("mediaType", ""),
            digest=data["digest"],
            size=int(data.get("size", 0)),
            platform=Platform.from_dict(platform) if platform else None,
            annotations=dict(data.get("annotations") or {}),
        )


@dataclass(frozen=True)
class ImageIndex:
    schema_version: int
    media_type: str
    manifests: tuple

    @classmethod
    def from_dict(cls, data: dict, media_type: str = "") -> "ImageIndex":
        return cls(
            schema_version=int(data["schemaVersion"]),
            media_type=data.get("mediaType", media_type),
            manifests=tuple(ManifestDescriptor.from_dict(m) for m in data["manifests"]),
        )

    def platforms(self) -> list[str]:
        return [str(m.platform) for m in self.manifests if m.platform is not None]

    def find(self, platform: str) -> Optional[ManifestDescriptor]:
        """
        Returns the first entry whose platform renders exactly to ``platform``.
        """
        for descriptor in self.manifests:
            if descriptor.platform is not None and str(descriptor.platform) == platform:
                return descriptor
        return None


@dataclass(frozen=True)
class Manifest:
    schema_version: int
    media_type: str
    config: LayerDescriptor
    layers: tuple

    @classmethod
    def from_dict(cls, data: dict, media_type: str = "") -> "Manifest":
        # mediaType is optional in OCI manifests, fall back to the response type
        return cls(
            schema_version=int(data["schemaVersion"]),
            media_type=data.get("mediaType", media_type),
            config=LayerDescriptor.from_dict(data["config"]),
            layers=tuple(LayerDescriptor.from_dict(layer) for layer in data["layers"]),
        )

    def to_dict(self) -> dict:
        return {
            "schemaVersion": self.schema_version,
            "mediaType": self.media_type,
            "config": self.config.to_dict(),
            "layers": [layer.to_dict() for layer in self.layers],
        }
