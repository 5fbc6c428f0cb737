from setuptools import setup, find_packages

setup(
    name="flowshape",
    version="0.1.0",
    description="Structured-data format conversion engine (XML, JSON, CSV, fixed-length, SQL)",
    author="Your Name",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "structlog>=23.1",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "pyyaml>=6.0",
        "typer>=0.9",
        "rich>=13.0",
        "python-dotenv>=1.0",
        "python-dateutil>=2.9",
        "tzdata>=2024.1; platform_system == 'Windows'",
        "pandas>=2.0",
        "polars>=0.20",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "flowshape=flowshape.cli:app"
        ]
    },
    python_requires=">=3.10",
    include_package_data=True,
)
