# setup.py
from setuptools import setup, find_packages

setup(
    name="doc_harvester",
    version="0.1.0",
    description="Асинхронный сборщик документации API DocHarvester",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["doc-harvester=doc_harvester.cli:cli"],
    },
    python_requires=">=3.11",
)
