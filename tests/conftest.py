"""Shared fixtures for scp_uploader tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() replaces root handlers; put them back after each test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def package_file(tmp_path):
    path = tmp_path / "job.tar.gz"
    path.write_bytes(b"topology package")
    return path


@pytest.fixture
def uploader_config(package_file):
    return {
        "uploader": {
            "scp": {
                "command": "scp -i key.pem",
                "connection": "deploy@storage.example.com",
            },
            "ssh": {"command": "ssh -i key.pem"},
            "dir_path": "/mnt/share/topologies",
        },
        "topology": {"name": "wordcount", "package_file": str(package_file)},
        "role": "svc",
    }
