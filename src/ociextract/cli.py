#!/bin/env python3

import logging
import os
import sys

import click
from dotenv import load_dotenv

from ociextract.commands import image
from ociextract.exceptions import ConfigurationError
from ociextract.helper.utils import CONFIG_FILE, get_command_defaults, get_config


@click.group()
@click.option(
    "--config",
    "config_file",
    default=CONFIG_FILE,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="ini file whose [DEFAULT] section overrides option defaults",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_file, verbose):
    """Extract container image layers from an OCI registry"""
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    load_dotenv(os.path.join(os.getcwd(), ".env"))

    try:
        defaults = get_command_defaults(get_config(config_file))
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    ctx.default_map = {
        "image": {name: dict(defaults) for name in image.image.commands}
    }


cli.add_command(image.image)


if __name__ == "__main__":
    cli()
