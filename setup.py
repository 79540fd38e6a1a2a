from setuptools import setup, find_namespace_packages

setup(
    name="estransport",
    version="0.1.0",
    packages=find_namespace_packages(include=["src", "src.estransport*"]),
    install_requires=[
        "httpx",
        "pydantic>=2",
        "pydantic-settings",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.9",
)
