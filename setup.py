# encoding: utf-8
from setuptools import setup, find_packages
import os
pkg = "pointprobe"

version_path = os.path.abspath(pkg + '/version.py')
version_info = {"__file__": version_path}
with open(version_path, 'rt', encoding="utf-8") as h:
    exec(compile(h.read(), version_path, 'exec'), version_info)
ver = version_info["__version__"].partition("~")[0]

setup(
    name             = pkg,
    version          = ver,
    description      = (
        "Point probes for finite element fields and their gradients"),
    long_description = (
        "Locate the mesh cell containing a point once, cache the basis "
        "function values and derivatives there, and accumulate time "
        "series of field values and gradients cheaply."),
    license          = "LGPLv3",
    packages         = find_packages(include=[pkg, pkg + '.*']),
    python_requires  = ">=3.7",
    install_requires = [
        'numpy', 'scipy', 'pandas',
        'sortedcontainers',
        'cached_property'],
    extras_require   = {
        'test': ['pytest']},
    classifiers      = [
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Scientific/Engineering :: Physics",
        "Topic :: Software Development :: Libraries"])
