# setup.py
from setuptools import setup, find_packages

setup(
    name="cclog",
    version="0.1.0",
    description="Multi-sink structured logger with monitor mirroring and rotating log files",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "rich>=13.0",
    ],
    extras_require={
        "gui": [
            "customtkinter>=5.2",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
