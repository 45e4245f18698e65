from setuptools import setup, find_packages

setup(
    name="waystop",
    version="0.1.0",
    packages=find_packages(include=["waystop", "waystop.*"]),
    package_data={"waystop": ["data/*.json", "static/*.html"]},
    install_requires=[
        "fastapi",
        "uvicorn",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "polyline",
        "aiohttp",
        "httpx",
        "openpyxl",
        "tenacity",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "waystop=waystop.main:run",
        ],
    },
    python_requires=">=3.9",
)
