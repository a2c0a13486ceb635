"""
Configuration loading, validation and logging setup for the scp uploader.

Configuration is merged from (lowest to highest precedence) a base mapping, any number
of YAML files, and ``key=value`` overrides, then frozen so the uploader only ever sees
an immutable view.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from . import context
from .context import UploaderConfigError

logger = logging.getLogger(__name__)


# Checked in this order; the command templates come first so a missing template is
# always the reported cause. scp needs its own user@host because the destination host
# follows the source argument and cannot be carried by the command template.
REQUIRED_KEYS = [
    (context.SCP_COMMAND_KEY, "scp command"),
    (context.SSH_COMMAND_KEY, "ssh command"),
    (context.SCP_CONNECTION_KEY, "scp destination user@host"),
    (context.UPLOAD_DIR_PATH_KEY, "upload directory path"),
    (context.TOPOLOGY_PACKAGE_FILE_KEY, "topology package file"),
    (context.TOPOLOGY_NAME_KEY, "topology name"),
    (context.ROLE_KEY, "role"),
]


def validate_config(config: context.ConfigLike) -> List[str]:
    """
    Validate an uploader configuration.

    Args:
        config: Configuration mapping or DictConfig

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []
    for key_path, label in REQUIRED_KEYS:
        try:
            value = context.get_value(config, key_path)
        except UploaderConfigError as e:
            errors.extend(e.errors)
            continue
        if value is None:
            errors.append(f"Missing {key_path} config value ({label})")
    return errors


def load_config(
    config_files: Iterable[str] = (),
    overrides: Iterable[str] = (),
    base: Optional[Dict[str, Any]] = None,
) -> DictConfig:
    """
    Load and merge uploader configuration.

    Args:
        config_files: YAML files, merged in the order given
        overrides: Dotlist overrides such as ``uploader.dir_path=/mnt/share``
        base: Optional mapping with the lowest precedence

    Returns:
        Read-only merged configuration

    Raises:
        UploaderConfigError: If a file is missing, unreadable or not valid YAML
    """
    configs = [OmegaConf.create(base or {})]

    for config_file in config_files:
        config_path = Path(config_file).expanduser()
        if not config_path.exists():
            raise UploaderConfigError(f"Configuration file not found: {config_path}")
        try:
            loaded = OmegaConf.load(config_path)
        except (OmegaConfBaseException, yaml.YAMLError) as e:
            raise UploaderConfigError(
                f"Invalid configuration file {config_path}: {e}"
            ) from e
        except OSError as e:
            raise UploaderConfigError(
                f"Cannot read configuration file {config_path}: {e}"
            ) from e
        if not isinstance(loaded, DictConfig):
            raise UploaderConfigError(
                f"Configuration file must contain a YAML dictionary: {config_path}"
            )
        logger.debug(f"Loaded configuration file {config_path}")
        configs.append(loaded)

    overrides = list(overrides)
    if overrides:
        try:
            configs.append(OmegaConf.from_dotlist(overrides))
        except OmegaConfBaseException as e:
            raise UploaderConfigError(f"Invalid override {overrides}: {e}") from e

    merged = OmegaConf.merge(*configs)
    OmegaConf.set_readonly(merged, True)
    return merged


def setup_logging(verbosity: int = 0):
    """
    Configures the logging level based on the verbosity provided by the user.

    Args:
        verbosity (int): The number of '-v' flags used.
                       - 0: ERROR level (default)
                       - 1: WARNING level
                       - 2: INFO level
                       - 3 or more: DEBUG level
    """
    root_logger = logging.getLogger()

    # Remove existing handlers to avoid duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if verbosity == 1:
        level = logging.WARNING
        format_str = "%(levelname)s: %(message)s"
    elif verbosity == 2:
        level = logging.INFO
        format_str = "%(levelname)s: %(message)s"
    elif verbosity >= 3:
        level = logging.DEBUG
        format_str = "%(levelname)s:%(name)s: %(message)s"
    else:
        level = logging.ERROR
        format_str = "%(levelname)s: %(message)s"

    root_logger.setLevel(level)
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_str))
    root_logger.addHandler(handler)
