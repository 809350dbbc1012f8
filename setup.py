#!/usr/bin/env python3
"""
Setup configuration for spot-ripper
Resolve Spotify references and download their tracks and episodes as Ogg Vorbis
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "librespot>=0.0.9",
    "pycryptodome>=3.18.0",
    "requests>=2.31.0",
    "yt-dlp>=2023.12.30",
    "click>=8.1.7,<8.5",
    "rich-click>=1.7.0",
    "rich>=13.0.0",
    "pyyaml>=6.0.1",
    "tqdm>=4.66.1",
]

setup(
    name="spot-ripper",
    version="0.1.0",
    author="spot-ripper Team",
    description="Download Spotify tracks and podcast episodes as Ogg Vorbis files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "spot-ripper=spot_ripper.cli:main",
        ],
    },
    keywords="spotify librespot ogg vorbis podcast download cli",
)
