# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- UI & REACTIVE ---
    # Run this First to install FletX and Flet
    # uv pip install FletXr[dev] --pre
    "flet>=0.70.0",
    "FletXr",

    # --- STORAGE & MODELS ---
    "duckdb>=0.10.0",   # Device-local session storage
    "pydantic>=2.0.0",

    # --- CONFIG ---
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",

    # --- UTILS ---
    "httpx>=0.27.0",    # REST API client
]

extras_require = {
    # --- TESTS---
    "tests": [
        "pytest-asyncio==1.3.0",
        "pytest",
    ],
}

setup(
    name="famfin",
    version="0.1.0",
    description="famfin | Family finance tracker",
    packages=find_packages(include=["famfin", "famfin.*"]),
    include_package_data=True,
    package_data={"famfin.shared.config": ["settings/*.yaml"]},
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={"console_scripts": ["famfin=famfin.client.main:run"]},
    python_requires=">=3.11",
)
