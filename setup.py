#!/usr/bin/env python3
"""
Pac-Man Agents - MCTS ghosts and a Q-learning Pac-Man
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read the README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
if requirements_file.exists():
    with open(requirements_file) as f:
        requirements = [
            line.strip()
            for line in f
            if line.strip() and not line.startswith("#") and not line.startswith("git+")
        ]
else:
    requirements = [
        "numpy>=1.24.0",
    ]

setup(
    name="pacman-agents",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Monte Carlo Tree Search ghosts and a tabular Q-learning Pac-Man",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
        "dev": [
            "black>=24.0.0",
            "flake8>=7.0.0",
            "mypy>=1.8.0",
            "pre-commit>=3.6.0",
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pacman-agents=pacman_agents.runner:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
