"""
Setup script for the math-battle package.

Installs the battle engine, the leaderboard storage (with its SQL
schema) and the ``math-battle`` console command.
"""

from setuptools import setup, find_packages

setup(
    name="math-battle",
    version="1.0.0",
    description="Math Battle - two-player turn-based math quiz engine",
    author="Course Staff",
    license="Proprietary",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "math_battle._storage": ["schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "math-battle=math_battle.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
