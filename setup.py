"""
Setup script for stigmergence package
Deterministic multi-population physarum (slime mold) simulation and trail rendering
"""
from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="stigmergence",
    version="0.1.0",
    description="Seeded agent-based physarum simulation with food fields and trail rendering",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Artificial Life",
        "Topic :: Multimedia :: Graphics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "src"},
    packages=find_packages(where="src", exclude=["*.tests", "*.tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Core scientific stack
        "numpy>=1.22",
        "scipy>=1.7,<2.0",
        # JIT kernels
        "numba>=0.57",
        # In-memory image conversion
        "pillow>=10.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-cov>=3.0",
        ],
        "dev": [
            "black>=22.0",
            "isort>=5.0",
            "pytest>=7.0",
            "pytest-cov>=3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "stigmergence-warmup=stigmergence.warmup:run_global_warmup",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
