# flake8: noqa
from setuptools import setup, find_packages
from pathlib import Path

long_description = (Path(__file__).parent / "README.md").read_text()

exec(open("refphase/version.py").read())

setup(
    name="refphase",
    version=__version__,
    description="Windowed reference-panel genotype phasing and imputation",
    packages=find_packages(include=["refphase", "refphase.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pandas",
        "dask[array]>=2021.11.2",
        "tqdm",
        "structlog",
        "fire",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["refphase=refphase.cli:cli"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Intended Audience :: Science/Research",
    ],
    long_description=long_description,
    long_description_content_type="text/markdown",
)
