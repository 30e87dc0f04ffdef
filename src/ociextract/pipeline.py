"""
Fetch and extract the most recent layers of an image, topmost layer first.
"""

import logging
import os
import tempfile
from typing import Optional

from ociextract.exceptions import ExtractionFailedError, LayerCountError
from ociextract.helper.tar import Extractor, TarExtractor
from ociextract.helper.utils import check_output_dir, layer_archive_name
from ociextract.oras.models import LayerDescriptor, Manifest
from ociextract.oras.reference import ImageReference
from ociextract.oras.registry import ExtractRegistry

logger = logging.getLogger(__name__)


def check_layer_count(count: int, available: Optional[int] = None):
    if count < 1:
        raise LayerCountError(f"Number of layers must be positive, got {count}")
    if available is not None and count > available:
        raise LayerCountError(
            f"Image contains {available} layers. Requested to extract {count} layers."
        )


def layer_order(total: int, count: int) -> list[int]:
    """Indices of the ``count`` most recent of ``total`` layers, topmost first."""
    return [total - i for i in range(1, count + 1)]


class ExtractionPipeline:
    def __init__(
        self,
        registry: ExtractRegistry,
        extractor: Optional[Extractor] = None,
        work_dir: Optional[str] = None,
    ):
        self.registry = registry
        self.extractor = extractor if extractor is not None else TarExtractor()
        self.work_dir = work_dir

    def run(
        self, image: ImageReference, manifest: Manifest, count: int, output_dir: str
    ) -> list[LayerDescriptor]:
        """
        Extract the ``count`` most recent layers of ``manifest`` into
        ``output_dir``. Each archive is deleted before the next layer is
        fetched. Stops at the first failure, layers extracted so far stay.
        """
        check_layer_count(count, len(manifest.layers))
        os.makedirs(output_dir, exist_ok=True)

        if self.work_dir is not None:
            os.makedirs(self.work_dir, exist_ok=True)
            return self._process(image, manifest, count, output_dir, self.work_dir)
        with tempfile.TemporaryDirectory(prefix="ociextract-") as work_dir:
            return self._process(image, manifest, count, output_dir, work_dir)

    def _process(
        self,
        image: ImageReference,
        manifest: Manifest,
        count: int,
        output_dir: str,
        work_dir: str,
    ) -> list[LayerDescriptor]:
        processed = []
        for sequence, index in enumerate(layer_order(len(manifest.layers), count), 1):
            layer = manifest.layers[index]
            logger.info(
                f"Fetching layer {sequence}. Size: {layer.size_mb} MB. Digest: {layer.digest}"
            )
            archive = os.path.join(work_dir, layer_archive_name(image.name, sequence))
            self.registry.fetch_layer(image, layer, archive)

            logger.info(f"Extracting files from {archive} to {output_dir}")
            exit_code = self.extractor(archive, output_dir)
            if exit_code != 0:
                raise ExtractionFailedError(archive, exit_code)

            os.remove(archive)
            logger.debug(f"Removed {archive}")
            processed.append(layer)
        return processed


def extract_image(
    registry: ExtractRegistry,
    image: ImageReference,
    platform: str,
    output_dir: str,
    count: int,
    extractor: Optional[Extractor] = None,
    work_dir: Optional[str] = None,
) -> list[LayerDescriptor]:
    """
    Resolve ``image`` for ``platform`` and extract its ``count`` most recent
    layers into ``output_dir``. Input is checked before the first request.
    """
    check_layer_count(count)
    check_output_dir(output_dir)

    manifest = registry.resolve(image, platform)
    check_layer_count(count, len(manifest.layers))

    pipeline = ExtractionPipeline(registry, extractor=extractor, work_dir=work_dir)
    return pipeline.run(image, manifest, count, output_dir)
