from setuptools import find_namespace_packages, setup

setup(
    name="heatpump_link",
    version="0.1.0",
    description="Polls Luxtronik/Novelan heat pumps and forwards commands as parameter writes",
    author="Your Name",
    author_email="your.email@example.com",
    packages=find_namespace_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "heatpump-link=heatpump_link.entrypoints.daemon:run",
        ],
    },
    python_requires=">=3.10",
)
