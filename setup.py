"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/zackees/simple-webpack"
KEYWORDS = "webpack javascript bundler babel eslint build tool cli"
HERE = os.path.dirname(os.path.abspath(__file__))


def read_version() -> str:
    """Read __version__ from the package without importing it."""
    init_py = os.path.join(HERE, "src", "simplewebpack", "__init__.py")
    with open(init_py, encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=", 1)[1].strip().strip("\"'")
    raise RuntimeError("Unable to find __version__ in " + init_py)


if __name__ == "__main__":
    setup(
        name="simple-webpack",
        version=read_version(),
        description="Directory-convention-driven webpack builds from the command line",
        maintainer="Zachary Vorhies",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages("src"),
        package_data={"simplewebpack": ["assets/*.json"]},
        include_package_data=True,
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={
            "console_scripts": [
                "simple-webpack=simplewebpack.cli:main",
            ],
        },
    )
