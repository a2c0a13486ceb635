"""
This script configures the installation of the 'scp-uploader' Python package using setuptools.
Defines the package metadata, dependencies, and entry points for the command-line interface (CLI).
The CLI command 'scp-uploader' is linked to the 'cli.scp_uploader' function, enabling
validation, upload and rollback of topology packages on a shared host.

Run 'pip install -e .' to install the package in editable mode for development purposes.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="scp-uploader",
    version="0.1.0",
    description="Upload topology packages to a shared cluster host with scp",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
    ],
    python_requires=">=3.8",
    install_requires=[
        "omegaconf",
        "click",
        "rich",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["scp-uploader=scp_uploader.cli:scp_uploader"],
    },
)
