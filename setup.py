# setup.py
from setuptools import setup, find_packages

setup(
    name="asyncfilelog",
    version="1.0.0",
    description="Asynchronous, thread-safe file logger with size rotation and count pruning",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'asyncfilelog=asyncfilelog.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
