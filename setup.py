from setuptools import find_packages, setup

setup(
    name="tickbar",
    version="0.1.0",
    description="Terminal progress bar with sliding-window ETA and safe log interleaving",
    packages=find_packages(include=["tickbar", "tickbar.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "tracerite",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["tickbar=tickbar.cli:main"],
    },
)
