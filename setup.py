# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- HTTP ---
    "httpx>=0.27.0",

    # --- PERSISTENCE & MODELS ---
    "duckdb>=0.10.0",
    "pydantic>=2.0.0",

    # --- CONFIG ---
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",

    # --- CONSOLE ---
    "rich>=13.0.0",
]

extras_require = {
    # --- TESTS---
    "test": [
        "pytest-asyncio==1.3.0",
        "pytest",
    ],
}

setup(
    name="banana-client",
    version="0.3.0",
    description="Banana|Client - session and view-state coordinator for the Banana game",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    entry_points={"console_scripts": ["banana-client=banana_client.client.main:cli"]},
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.11",
)
