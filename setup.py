"""stac_fastapi: cql2 filter module."""

from setuptools import find_namespace_packages, setup

with open("README.md") as f:
    desc = f.read()

install_requires = [
    "attrs>=23.2.0",
    "orjson>=3.9.0",
    "pydantic>=2.4.1,<3.0.0",
    "pydantic-settings>=2.0.0",
    "stac-fastapi.types>=6.0.0,<7.0.0",
    "geojson-pydantic>=1.0.0,<2.0.0",
]

extra_reqs = {
    "dev": [
        "pytest>=7.0.0",
        "pytest-cov>=4.0.0",
        "pre-commit>=3.0.0",
    ],
}

setup(
    name="stac_fastapi_cql2",
    description="CQL2-JSON filter parsing, building and translation for stac-fastapi.",
    long_description=desc,
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    classifiers=[
        "Intended Audience :: Developers",
        "Intended Audience :: Information Technology",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "License :: OSI Approved :: MIT License",
    ],
    url="https://github.com/stac-utils/stac-fastapi-elasticsearch-opensearch",
    license="MIT",
    packages=find_namespace_packages(include=["stac_fastapi.cql2*"]),
    zip_safe=False,
    install_requires=install_requires,
    tests_require=extra_reqs["dev"],
    extras_require=extra_reqs,
)
