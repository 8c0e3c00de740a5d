"""Setup module for the Ping Manager bot."""
from pathlib import Path
from setuptools import setup, find_packages

PROJECT_DIR = Path(__file__).parent.resolve()

README_FILE = PROJECT_DIR / "README.md"
LONG_DESCRIPTION = README_FILE.read_text(encoding="utf-8")

REQUIRES = [
    "aiohttp>=3.9.0",
    "discord.py>=2.3.0",
    "python-dotenv>=1.0.0",
    "voluptuous>=0.13.1",
]

TEST_REQUIRES = [
    "pytest>=7.4.0",
    "pytest-asyncio>=0.23.0",
]

setup(
    name="ping_manager",
    version="1.0.0",
    description="Discord bot that schedules CRCON max ping autokick windows",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    python_requires=">=3.10",
    install_requires=REQUIRES,
    extras_require={"test": TEST_REQUIRES},
    entry_points={"console_scripts": ["ping-manager=main:main"]},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: System Administrators",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Games/Entertainment",
    ],
)
