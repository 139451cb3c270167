"""Setup script for algorithm-j."""

from setuptools import setup, find_packages

setup(
    name="algorithm-j",
    version="0.1.0",
    description="Hindley-Milner type inference (Algorithm J) with let-polymorphism",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1.7",
    ],
    extras_require={
        "dev": [
            "pytest>=8.1.1",
            "pytest-cov>=5.0.0",
            "mypy>=1.9.0",
            "black>=24.3.0",
            "ruff>=0.3.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "algorithm-j=algorithm_j.cli:main",
        ],
    },
)
