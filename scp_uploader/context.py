"""
Configuration accessors for the scp uploader.

Every value the uploader consumes is read through one of these functions so the
key layout lives in a single place. Keys are dot-separated paths into an OmegaConf
configuration, e.g.:

    uploader:
      scp:
        command: "scp -i ~/.ssh/id_rsa"
        connection: "deploy@storage.example.com"
      ssh:
        command: "ssh -i ~/.ssh/id_rsa"
        connection: "deploy@storage.example.com"
      dir_path: /mnt/share/topologies
    topology:
      name: wordcount
      package_file: /tmp/wordcount.tar.gz
    role: svc
    verbose: false
"""

from typing import Any, List, Mapping, Optional, Union

from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import InterpolationResolutionError

SCP_COMMAND_KEY = "uploader.scp.command"
SCP_CONNECTION_KEY = "uploader.scp.connection"
SSH_COMMAND_KEY = "uploader.ssh.command"
SSH_CONNECTION_KEY = "uploader.ssh.connection"
UPLOAD_DIR_PATH_KEY = "uploader.dir_path"
VERBOSE_KEY = "verbose"
TOPOLOGY_PACKAGE_FILE_KEY = "topology.package_file"
TOPOLOGY_NAME_KEY = "topology.name"
ROLE_KEY = "role"

ConfigLike = Union[DictConfig, Mapping[str, Any]]


class UploaderConfigError(Exception):
    """Raised when the uploader configuration is missing required values or cannot be loaded."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


def as_config(config: ConfigLike) -> DictConfig:
    """Return ``config`` as a DictConfig, converting plain mappings."""
    if isinstance(config, DictConfig):
        return config
    return OmegaConf.create(dict(config or {}))


def get_value(config: ConfigLike, key_path: str) -> Any:
    """Get configuration value by dot-separated path (e.g., 'uploader.dir_path')."""
    try:
        value = OmegaConf.select(as_config(config), key_path, default=None)
    except InterpolationResolutionError as e:
        message = f"Cannot resolve {key_path} config value: {e}"
        raise UploaderConfigError(message, [message]) from e
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _get_str(config: ConfigLike, key_path: str) -> Optional[str]:
    value = get_value(config, key_path)
    return None if value is None else str(value)


def scp_command(config: ConfigLike) -> Optional[str]:
    return _get_str(config, SCP_COMMAND_KEY)


def scp_connection(config: ConfigLike) -> Optional[str]:
    return _get_str(config, SCP_CONNECTION_KEY)


def ssh_command(config: ConfigLike) -> Optional[str]:
    return _get_str(config, SSH_COMMAND_KEY)


def ssh_connection(config: ConfigLike) -> Optional[str]:
    return _get_str(config, SSH_CONNECTION_KEY)


def upload_dir_path(config: ConfigLike) -> Optional[str]:
    return _get_str(config, UPLOAD_DIR_PATH_KEY)


def topology_package_file(config: ConfigLike) -> Optional[str]:
    return _get_str(config, TOPOLOGY_PACKAGE_FILE_KEY)


def topology_name(config: ConfigLike) -> Optional[str]:
    return _get_str(config, TOPOLOGY_NAME_KEY)


def role(config: ConfigLike) -> Optional[str]:
    return _get_str(config, ROLE_KEY)


def verbose(config: ConfigLike) -> bool:
    """Verbose flag; accepts booleans or the usual truthy strings."""
    value = get_value(config, VERBOSE_KEY)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
