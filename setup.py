# setup.py
from setuptools import setup, find_packages

setup(
    name="langmanager",
    version="1.0.0",
    description="Hot-reloading manager for directories of JSON translation files",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "langmanager.interface.locales": ["*.json"],
    },
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        'console_scripts': [
            'langmanager=langmanager.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
