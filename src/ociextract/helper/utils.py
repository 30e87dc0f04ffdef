import configparser
import logging
import os

from ociextract.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.ini"

# config.ini key -> parameter name of the image commands
CONFIG_KEYS = {
    "platform": "platform",
    "output_dir": "output_dir",
    "layers": "layer_count",
    "auth_type": "auth_type",
    "insecure": "insecure",
}


def get_config(config_file: str = CONFIG_FILE) -> configparser.ConfigParser:
    config = configparser.ConfigParser()
    if os.path.exists(config_file):
        config.read(config_file)
    return config


def get_command_defaults(config: configparser.ConfigParser) -> dict:
    """
    Map the [DEFAULT] section of ``config`` to parameter defaults for the
    image commands. Unknown keys are ignored.
    """
    section = config["DEFAULT"]
    defaults = {}
    for key, param in CONFIG_KEYS.items():
        if key not in section:
            continue
        try:
            if key == "insecure":
                defaults[param] = section.getboolean(key)
            elif key == "layers":
                defaults[param] = section.getint(key)
            else:
                defaults[param] = section[key]
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for '{key}' in config: {e}") from e
    return defaults


def check_output_dir(output_dir: str) -> bool:
    """
    Returns True if ``output_dir`` already exists. An existing path that is
    not a directory is an error.
    """
    if not os.path.exists(output_dir):
        return False
    if not os.path.isdir(output_dir):
        raise ConfigurationError(
            f"Output dir {output_dir} already exists, but is not a directory."
        )
    logger.warning(
        "Output dir already exists. If it contains a previous extracted image, "
        "there may be errors when trying to overwrite files with read-only permissions."
    )
    return True


def layer_archive_name(repository_name: str, sequence: int) -> str:
    return f"{repository_name.rsplit('/', 1)[-1]}_layer{sequence}.tar.gz"
