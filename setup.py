from setuptools import setup, find_packages

setup(
    name="portfolio-engine",
    version="1.0.0",
    author="Portfolio Analytics Team",
    description="Portfolio valuation, risk analytics and rebalancing engine",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "portfolio_engine": ["py.typed"],
        "engine_config": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "PyYAML>=6.0",
        "numpy>=1.26",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    python_requires=">=3.11",
)
