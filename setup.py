"""EczemaHub - Package Setup"""

from setuptools import setup, find_packages
from eczemahub import __version__

setup(
    name="eczemahub",
    version=__version__,
    description="EczemaHub - community catalog of eczema treatment, prevention and research resources",
    author="EczemaHub Contributors",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "eczemahub": [
            "config/*.yaml",
        ],
    },
    entry_points={
        "console_scripts": [
            "eczemahub=eczemahub.main:main",
        ],
    },
    install_requires=[
        "fastapi>=0.115.0",
        "uvicorn[standard]>=0.32.0",
        "pydantic>=2.9.0",
        "pyyaml>=6.0.2",
        "rich>=13.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.24",
            "httpx>=0.27.0",
        ],
    },
)
