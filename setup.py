"""
Setup configuration for vdtesting.

The CLI command 'vdtesting' runs the virtual device testing build step.
"""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

# Read version from the package
version = "1.0.0"
with open(this_directory / "vdtesting" / "__init__.py") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split('"')[1]
            break

# Read requirements
requirements = []
with open(this_directory / "requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

# Read dev requirements
dev_requirements = []
try:
    with open(this_directory / "requirements-dev.txt") as f:
        dev_requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]
except FileNotFoundError:
    pass

setup(
    name="vdtesting",
    version=version,
    description="Build step that runs Android apps on a matrix of virtual devices and reports the results",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "vdtesting=vdtesting.__main__:main",
        ],
    },
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
        "test": dev_requirements,
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Testing",
        "Topic :: Software Development :: Build Tools",
    ],
    keywords="android testing virtual-devices ci build-step",
)
