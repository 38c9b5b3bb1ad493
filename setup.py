from setuptools import setup, find_packages
from pathlib import Path

# Read the README file for the long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    name="bookconnect",
    version="0.1.0",
    description="Browse, filter and page through a preloaded book catalog",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["bookconnect", "bookconnect.*"]),
    entry_points={
        "console_scripts": [
            "bookconnect=bookconnect.cli:app"
        ],
    },
    install_requires=[
        "typer>=0.9.0",
        "rich>=13.0.0",
        "pyyaml>=6.0",
        "jinja2>=3.0.0",
        "markupsafe>=2.0",
        "fastapi>=0.100.0",
        "pydantic>=1.10",
        "uvicorn>=0.20.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "httpx>=0.24.0",
            "black>=23.0.0",
            "isort>=5.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
    ],
    python_requires='>=3.8',
    include_package_data=True,
    package_data={
        "bookconnect": ["templates/*.html", "data/*.json"],
    },
)
