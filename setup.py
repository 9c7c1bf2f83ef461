from setuptools import setup, find_packages

setup(
    name="artemis-archery-tracker",
    version="0.1.0",
    description="Archery practice tracker: shot scoring, grouping and practice history",
    author="Artemis",
    packages=find_packages(exclude=["tests"]),
    package_data={"src.database": ["schema.sql"]},
    python_requires=">=3.11",
    install_requires=[
        "PyQt6>=6.6.0",
        "numpy>=1.26.0",
    ],
    extras_require={
        "test": ["pytest>=8.0", "pytest-qt>=4.4"],
    },
    entry_points={
        "console_scripts": [
            "artemis=src.main:main",
        ],
    },
)
