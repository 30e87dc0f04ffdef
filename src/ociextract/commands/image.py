import json
from contextlib import contextmanager

import click

from ociextract.exceptions import ExtractError
from ociextract.helper.tar import TarExtractor
from ociextract.oras import schemas
from ociextract.oras.auth import AuthScheme, authorization_from_environment
from ociextract.oras.defaults import (
    default_layer_count,
    default_output_dir,
    default_platform,
    index_media_types,
)
from ociextract.oras.models import ImageIndex
from ociextract.oras.reference import ImageReference
from ociextract.oras.registry import ExtractRegistry, validate_document
from ociextract.pipeline import extract_image


@click.group()
def image():
    """Inspect and extract images"""
    pass


def setup_registry(auth_type: str, insecure: bool = False) -> ExtractRegistry:
    authorization = authorization_from_environment(AuthScheme(auth_type.lower()))
    return ExtractRegistry(authorization, insecure=insecure)


@contextmanager
def fatal_errors():
    try:
        yield
    except ExtractError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(str(e)) from e


image_argument = click.argument("image_ref", metavar="IMAGE")

platform_option = click.option(
    "-p",
    "--platform",
    default=default_platform,
    show_default=True,
    help="Pull image for the specified platform (os/architecture[/variant]). "
    "For a given image on Docker Hub, the 'Tags' tab lists the platforms "
    "supported for that image.",
)

auth_type_option = click.option(
    "-t",
    "--auth-type",
    type=click.Choice([scheme.value for scheme in AuthScheme], case_sensitive=False),
    default=AuthScheme.TOKEN.value,
    show_default=True,
    help="Type of auth. basic reads BASIC_USER and BASIC_PASSWORD from the environment",
)

insecure_option = click.option(
    "--insecure",
    is_flag=True,
    default=False,
    help="Talk plain http to the registry",
)


@image.command()
@image_argument
@platform_option
@click.option(
    "-o",
    "--output",
    "output_dir",
    default=default_output_dir,
    show_default=True,
    type=click.Path(),
    help="Extract image to the specified output dir",
)
@click.option(
    "-n",
    "--layers",
    "layer_count",
    default=default_layer_count,
    show_default=True,
    type=click.IntRange(min=1),
    help="Number of layers to be extracted, will be taken in reverse order",
)
@auth_type_option
@insecure_option
@click.option("--list-files", is_flag=True, help="Log every extracted file")
def extract(
    image_ref, platform, output_dir, layer_count, auth_type, insecure, list_files
):
    """Extract the most recent layers of IMAGE

    IMAGE can be a community user image (like 'some-user/some-image') or a
    Docker official image (like 'hello-world', which contains no '/').
    """
    with fatal_errors():
        registry = setup_registry(auth_type, insecure)
        reference = ImageReference.parse(image_ref)
        click.echo(
            f"image: {image_ref}\nplatform: {platform}\noutDir: {output_dir}\n"
            f"numberOfLayers: {layer_count}\nauthType: {auth_type.upper()}"
        )
        layers = extract_image(
            registry,
            reference,
            platform,
            output_dir,
            layer_count,
            extractor=TarExtractor(verbose=list_files),
        )
    click.echo(f"Extracted {len(layers)} layer(s) of {reference} to {output_dir}")


@image.command()
@image_argument
@platform_option
@auth_type_option
@insecure_option
def inspect(image_ref, platform, auth_type, insecure):
    """Print the manifest IMAGE resolves to for a platform"""
    with fatal_errors():
        registry = setup_registry(auth_type, insecure)
        manifest = registry.resolve(ImageReference.parse(image_ref), platform)
    click.echo(json.dumps(manifest.to_dict(), indent=4))


@image.command("inspect-index")
@image_argument
@auth_type_option
@insecure_option
def inspect_index(image_ref, auth_type, insecure):
    """Print the document the registry serves for IMAGE"""
    with fatal_errors():
        registry = setup_registry(auth_type, insecure)
        media_type, document = registry.get_manifest_document(
            ImageReference.parse(image_ref)
        )
        click.echo(f"content-type: {media_type}")
        click.echo(json.dumps(document, indent=4))
        if media_type in index_media_types:
            validate_document(document, schemas.index)
            platforms = ImageIndex.from_dict(document, media_type).platforms()
            click.echo("platforms:")
            for platform in platforms:
                click.echo(f"  {platform}")


@image.command()
@image_argument
@auth_type_option
@insecure_option
def tag(image_ref, auth_type, insecure):
    """Print the repository tag information of IMAGE"""
    with fatal_errors():
        registry = setup_registry(auth_type, insecure)
        document = registry.get_tag(ImageReference.parse(image_ref))
    click.echo(json.dumps(document, indent=4))
