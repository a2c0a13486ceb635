"""
Uploader that places topology packages on a shared machine in the cluster using scp.

Packages are copied into a directory on the upload host; workers then fetch them from
that location. If a later deployment stage fails the caller can ``undo`` the upload,
which deletes the copied package.

Configuration consumed (see ``scp_uploader.context`` for the key layout):

- ``uploader.scp.command``: first part of the scp command, e.g. identity file and port
- ``uploader.ssh.command``: ssh command used to run mkdir/rm on the upload host
- ``uploader.scp.connection``: ``user@host`` scp copies to (required)
- ``uploader.ssh.connection``: optional ``user@host`` for ssh, if the ssh command does
  not already name the host
- ``uploader.dir_path``: directory the package is uploaded to; the user must be able
  to write there
"""

import enum
import logging
import os
import posixpath
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from . import context
from .config import UploaderConfigError, validate_config
from .controller import CommandResult, ScpController
from .utils import generate_filename, is_local_file

logger = logging.getLogger(__name__)


class UploaderStateError(RuntimeError):
    """Raised when an uploader operation is called before initialize()."""

    pass


class UploadState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    UPLOADED = "uploaded"
    UNDONE = "undone"


class Uploader(ABC):
    """Plugin contract for components that make a topology package fetchable by workers."""

    @abstractmethod
    def initialize(self, config: context.ConfigLike) -> None:
        """
        Prepare the uploader from configuration.

        Raises:
            UploaderConfigError: If required configuration is missing
        """
        pass

    @abstractmethod
    def upload_package(self) -> Optional[str]:
        """
        Upload the topology package.

        Returns:
            URI workers use to fetch the package, or None if the upload failed
        """
        pass

    @abstractmethod
    def undo(self) -> bool:
        """Roll back the upload. Returns True if the package is gone."""
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ScpUploader(Uploader):
    """Uploads topology packages to a remote directory with scp."""

    def __init__(
        self,
        log: Optional[logging.Logger] = None,
        filename_generator: Callable[[str, str], str] = generate_filename,
    ):
        self.log = log or logger
        self.filename_generator = filename_generator
        self.config: Any = None
        self.controller: Optional[ScpController] = None
        self.topology_package_location: Optional[str] = None
        self.dest_topology_directory: Optional[str] = None
        self.dest_topology_file: Optional[str] = None
        self._package_uri: Optional[str] = None
        self._state = UploadState.UNINITIALIZED
        self._last_result: Optional[CommandResult] = None

    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def package_uri(self) -> Optional[str]:
        return self._package_uri

    @property
    def dest_file(self) -> Optional[str]:
        return self.dest_topology_file

    @property
    def last_result(self) -> Optional[CommandResult]:
        """Result of the most recent remote command, for diagnostics."""
        return self._last_result

    def get_scp_controller(
        self, config: Optional[context.ConfigLike] = None
    ) -> ScpController:
        """Build the controller from the scp/ssh settings (default: the current config)."""
        config = self.config if config is None else config
        scp_command = context.scp_command(config)
        ssh_command = context.ssh_command(config)
        if scp_command is None:
            raise UploaderConfigError(
                f"Missing {context.SCP_COMMAND_KEY} config value",
                [f"Missing {context.SCP_COMMAND_KEY} config value"],
            )
        if ssh_command is None:
            raise UploaderConfigError(
                f"Missing {context.SSH_COMMAND_KEY} config value",
                [f"Missing {context.SSH_COMMAND_KEY} config value"],
            )
        scp_connection = context.scp_connection(config)
        if scp_connection is None:
            raise UploaderConfigError(
                f"Missing {context.SCP_CONNECTION_KEY} config value",
                [f"Missing {context.SCP_CONNECTION_KEY} config value"],
            )

        return ScpController(
            scp_command,
            ssh_command,
            scp_connection,
            verbose=context.verbose(config),
            ssh_connection=context.ssh_connection(config),
            log=self.log,
        )

    def initialize(self, config: context.ConfigLike) -> None:
        # Nothing on self changes until the whole configuration has been accepted.
        config = context.as_config(config)
        errors = validate_config(config)
        if errors:
            raise UploaderConfigError(
                "Invalid uploader configuration: " + "; ".join(errors), errors
            )
        controller = self.get_scp_controller(config)

        directory = context.upload_dir_path(config).rstrip("/") or "/"
        package_location = os.path.expanduser(context.topology_package_file(config))
        file_name = self.filename_generator(
            context.topology_name(config), context.role(config)
        )
        # Both are built from the same directory and name so undo removes exactly
        # the file the URI points at.
        dest_file = posixpath.join(directory, file_name)
        package_uri = f"{directory.rstrip('/')}/{file_name}"

        self.config = config
        self.controller = controller
        self.dest_topology_directory = directory
        self.topology_package_location = package_location
        self.dest_topology_file = dest_file
        self._package_uri = package_uri
        self._last_result = None
        self._state = UploadState.INITIALIZED
        self.log.debug(
            f"Initialized scp uploader: {self.topology_package_location} -> "
            f"{self.dest_topology_file}"
        )

    def _require_initialized(self, operation: str):
        if self._state is UploadState.UNINITIALIZED or self.controller is None:
            raise UploaderStateError(f"{operation}() called before initialize()")

    def is_local_file_exists(self, path: Optional[str]) -> bool:
        return is_local_file(path)

    def upload_package(self) -> Optional[str]:
        self._require_initialized("upload_package")

        # first, check if the topology package exists
        if not self.is_local_file_exists(self.topology_package_location):
            self.log.error(
                f"Topology file {self.topology_package_location} does not exist."
            )
            return None

        # create the upload directory, if not exists
        self._last_result = self.controller.mkdirs_if_not_exists(
            self.dest_topology_directory
        )
        if not self._last_result.ok:
            self.log.error(
                "Failed to create directories required for uploading the topology "
                f"{self.dest_topology_directory}: {self._last_result.message}"
            )
            return None

        # now copy the file
        self._last_result = self.controller.copy_from_local_file(
            self.topology_package_location, self.dest_topology_file
        )
        if not self._last_result.ok:
            self.log.error(
                "Failed to upload the file from local file system to remote machine "
                f"{self.topology_package_location} -> {self.dest_topology_file}: "
                f"{self._last_result.message}"
            )
            return None

        self._state = UploadState.UPLOADED
        self.log.info(f"Package URL to download: {self._package_uri}")
        return self._package_uri

    def undo(self) -> bool:
        self._require_initialized("undo")

        self._last_result = self.controller.delete(self.dest_topology_file)
        if not self._last_result.ok:
            self.log.error(
                f"Failed to delete {self.dest_topology_file} on the remote machine: "
                f"{self._last_result.message}"
            )
            return False

        self._state = UploadState.UNDONE
        self.log.info(f"Deleted uploaded package {self.dest_topology_file}")
        return True

    def close(self) -> None:
        pass
