"""Setup script for the project."""

from setuptools import setup, find_packages

setup(
    name="training-diary",
    version="1.0.0",
    description="Personal workout and nutrition diary with AI plan generation",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn[standard]",
        "motor",
        "pymongo",
        "pydantic>=2",
        "pydantic-settings",
        "httpx",
        "langchain-core",
        "langchain-openai",
        "langchain-anthropic",
        "bcrypt",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    python_requires=">=3.10",
)
