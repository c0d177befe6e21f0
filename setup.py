# setup.py
from setuptools import setup, find_packages

setup(
    name="elc",
    version="0.1.0",
    description="Extensible untyped lambda calculus with user defined reader tokens",
    packages=find_packages(include=["elc", "elc.*", "elc_lsp", "elc_lsp.*"]),
    package_data={"elc": ["lib/*.lc"]},
    python_requires=">=3.10",
    install_requires=[
        "pygls>=1.3,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["elc-ls=elc_lsp.server:ls.start_io"],
    },
    zip_safe=False,
)
