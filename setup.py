import os
from setuptools import setup, find_packages

this_directory = os.path.abspath(os.path.dirname(__file__))
try:
    with open(os.path.join(this_directory, "README.md"), encoding="utf-8") as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = "Typed input filtering and HTML sanitization for untrusted strings"

setup(
    name="inputfilter",
    version="1.0.0",
    description="Typed input filtering and HTML sanitization for untrusted strings",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["inputfilter", "inputfilter.*"]),
    install_requires=[
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "PyYAML>=6.0",
        "fastapi>=0.110",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "httpx>=0.25",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Security",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
)
