# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- DATA MODELS & CONFIG ---
    "pydantic>=2.0.0",
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",
    "jinja2>=3.0.0",

    # --- PERSISTENCE ---
    "duckdb>=0.10.0",

    # --- DISCOVERY PROVIDER ---
    "httpx>=0.27.0",

    # --- CONSOLE ---
    "rich>=13.0.0",
]

extras_require = {
    # --- TESTS ---
    "test": [
        "pytest",
        "pytest-asyncio>=0.23",
    ],
}

setup(
    name="infra-drishti",
    version="0.3.0",
    description="INFRA-DRISHTI infrastructure monitoring core",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "drishti.shared.config": [
            "settings/*.yaml",
            "data/*.yaml",
            "prompts/templates/*.j2",
        ],
    },
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "drishti=drishti.dashboard.main:main",
        ],
    },
    python_requires=">=3.12",
)
