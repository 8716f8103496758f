from setuptools import find_packages, setup

# Base requirements for the server
base_requirements = [
    "flask",
    "simple-websocket>=1.0",
    "wsproto",
    "watchdog",
    "werkzeug",
]

# Requirements for running the test suite
dev_requirements = [
    "pytest",
    "requests",
]

setup(
    name="liveserve",
    version="0.1.0",
    description="local file server with live reload",
    packages=find_packages(exclude=["tests", "tests.*"]),
    license="MIT",
    python_requires=">=3.8",
    install_requires=base_requirements,
    extras_require={
        "all": base_requirements + dev_requirements,
        "dev": dev_requirements,
    },
    entry_points={
        "console_scripts": ["liveserve=liveserve.cli:main"],
    },
)
