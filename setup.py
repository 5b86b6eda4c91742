from setuptools import setup, find_packages

setup(
    name="wfsprobe",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests>=2.25.1",
        "urllib3>=1.26",
    ],
    extras_require={
        "test": ["pytest>=6.2.4"],
    },
    entry_points={
        "console_scripts": [
            "wfsprobe=wfsprobe.core.cli.cli:main",
        ],
    },
)
