"""
This package uploads topology packages to a shared machine in the cluster with scp,
so workers can fetch them from a well-known location, and removes them again when a
deployment has to be rolled back.
"""

# __init__.py

__version__ = "0.1.0"

from .config import (  # noqa: E402
    UploaderConfigError,
    load_config,
    setup_logging,
    validate_config,
)
from .controller import CommandResult, ScpController  # noqa: E402
from .uploader import ScpUploader, Uploader, UploaderStateError, UploadState  # noqa: E402
from .utils import generate_filename  # noqa: E402

__all__ = [
    "CommandResult",
    "ScpController",
    "ScpUploader",
    "Uploader",
    "UploaderConfigError",
    "UploaderStateError",
    "UploadState",
    "generate_filename",
    "load_config",
    "setup_logging",
    "validate_config",
]
