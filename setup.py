from pathlib import Path

import setuptools

this_directory = Path(__file__).parent
long_description = (this_directory / "README.rst").read_text()

test_dependencies = ["pytest", "pre_commit"]


setuptools.setup(
    name="kinemap",
    version="0.1.0",
    description="Marker clustering and kinetic panning for zoomable map views.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=["kinemap"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Unix",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    keywords="map markers clustering smallest enclosing circle panning pinch zoom inertia",
    install_requires=[
        "scipy",
        "numpy>=1.18",
        "scikit-learn",
        "tqdm",
        "typer",
        "pandas",
        "matplotlib",
    ],
    test_suite="pytest",
    tests_require=test_dependencies,
    extras_require={"test": test_dependencies},
)
