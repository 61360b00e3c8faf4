#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

ksplot's installation script

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""

# Make sure this is being run with Python 3.8 or later.
import sys
if sys.version_info.major != 3 or sys.version_info.minor < 8:
    sys.exit('Error: you must execute setup.py using Python 3.8 or later')

from setuptools import setup, find_packages

# Get the program version from another file.
__version__ = "0.0.0"
exec(open('ksplot/version.py').read())

setup(
    name = "ksplot",
    version = __version__,
    description = "Ks plots of the paralogs in a transcriptome assembly using TransDecoder, BLAT "
                  "and KaKs_Calculator",
    long_description = open("README.md").read(),
    long_description_content_type = "text/markdown",
    packages = find_packages(exclude=["tests"]),
    python_requires = ">=3.8",
    install_requires = [
        "numpy",
        "pandas",
        "plotly",
        "tqdm",
    ],
    extras_require = {
        "test": ["pytest"],
    },
    entry_points = {
        "console_scripts": ["ksplot = ksplot.plot_ks:main",
                            "plot_ks = ksplot.plot_ks:main"]
        },
    license = "GPL",
    classifiers = [
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ]
)
