"""Helpers shared by uploaders."""

import os
from typing import Optional

DEFAULT_FILENAME_EXTENSION = ".tar.gz"


def generate_filename(
    topology_name: str,
    role: str,
    tag: Optional[str] = None,
    version: Optional[int] = None,
    extension: str = DEFAULT_FILENAME_EXTENSION,
) -> str:
    """
    Build the destination filename for a topology package.

    The name is fully determined by its arguments, so repeated uploads of the same
    topology and role land on (and undo removes) the same remote file.

    Examples:
        >>> generate_filename("wordcount", "svc")
        'wordcount-svc.tar.gz'
        >>> generate_filename("wordcount", "svc", tag="prod", version=3)
        'wordcount-svc-prod-3.tar.gz'
    """
    parts = [topology_name, role]
    if tag:
        parts.append(tag)
    if version is not None:
        parts.append(str(version))
    return "-".join(parts) + extension


def is_local_file(path: Optional[str]) -> bool:
    """Whether ``path`` (``~`` expanded) names an existing regular file on the local machine."""
    return bool(path) and os.path.isfile(os.path.expanduser(path))
