#!/usr/bin/env python
"""
Setup configuration for PoseKit package

Installation:
    pip install -e .

Installation with development dependencies:
    pip install -e ".[dev]"
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="posekit",
    version="0.1.0",
    description="Pose reference toolkit: keypoint transforms, variations, similarity search, catalog search and OpenPose interchange",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="PoseKit Team",
    author_email="",
    license="MIT",
    python_requires=">=3.8",

    packages=find_packages(include=["posekit*"]),

    # Core dependencies
    install_requires=[
        # Geometry and rendering
        "numpy>=1.21.0",
        "opencv-python>=4.5.0",

        # Image processing
        "pillow>=9.1.0",

        # Configuration
        "pyyaml>=5.4.0",

        # Progress bars
        "tqdm>=4.60.0",

        # Catalog search
        "rapidfuzz>=3.0.0",
    ],

    # Optional dependencies for development
    extras_require={
        "dev": [
            "pytest>=6.2.0",
            "pytest-cov>=2.12.0",
            "black>=21.0",
            "isort>=5.9.0",
            "flake8>=3.9.0",
            "mypy>=0.910",
        ],
    },

    # Entry points for CLI tools
    entry_points={
        "console_scripts": [
            "posekit=posekit.cli:main",
        ],
    },

    # Metadata
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Graphics",
        "Topic :: Scientific/Engineering :: Image Recognition",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],

    keywords="pose keypoints openpose coco skeleton photography",
)
