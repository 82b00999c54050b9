from setuptools import setup, find_packages

setup(
    name="trilattice",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "torch>=1.9.0",
        "numpy",
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    description="Trilinear interpolation of scalar fields sampled on regular 3D lattices",
    keywords="interpolation, trilinear, lattice, grid, periodic",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    python_requires=">=3.8",
)
