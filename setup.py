# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- CONSOLE UI ---
    "streamlit>=1.35.0",        # Core UI framework for the console
    "plotly>=5.18.0",           # Dashboard charts
    "pandas>=2.0.0",            # Chart and table frames

    # --- API & STATE ---
    "httpx>=0.27.0",            # Async admin API client
    "pydantic>=2.0.0",

    # --- CONFIG ---
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",
]

extras_require = {
    # --- TESTS---
    "test": [
        "pytest-asyncio==1.3.0",
        "pytest",
    ],
}

setup(
    name="backoffice-console",
    version="1.0.0",
    description="Backoffice admin console",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={"backoffice.shared.config": ["settings/*.yaml"]},
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.10",
)
