"""
Setup configuration for the UPower battery monitor.

Waybar custom module reporting battery levels of UPower devices.
"""

from setuptools import setup
from pathlib import Path

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = requirements_file.read_text().strip().split("\n") if requirements_file.exists() else []

# Read long description from README if it exists
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="upower-battery",
    version="0.3.0",
    description="UPower battery levels as Waybar JSON status lines",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="NixOS Configuration Team",
    author_email="",
    package_dir={"": "home-modules/tools"},
    packages=["upower_battery"],
    install_requires=requirements,
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "upower-battery=upower_battery.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    extras_require={
        # GLib bindings for pydbus; usually provided by the distribution
        "glib": [
            "PyGObject>=3.42",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
        ],
    },
)
