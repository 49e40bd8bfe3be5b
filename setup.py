#!/usr/bin/env python3
"""
Setup configuration for lyric-sync
Content-deduplicated lyrics upload, parsing and synchronized playback
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "click>=8.1.7",
    "rich-click>=1.7.0",
    "rich>=13.7.0",
    "pyyaml>=6.0.1",
    "tqdm>=4.66.1",
    "mutagen>=1.47.0",
]

setup(
    name="lyric-sync",
    version="0.1.0",
    author="lyric-sync Team",
    description="Upload audio with matching lyrics, deduplicate by content and play lyrics in sync",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["lyric_sync", "lyric_sync.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Text Processing",
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
            "lyric-sync=lyric_sync.cli:main",
        ],
    },
    include_package_data=True,
    keywords="lyrics lrc karaoke sync deduplication cli",
)
