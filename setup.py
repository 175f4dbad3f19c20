from setuptools import setup, find_packages


setup(
    name="biner",
    version="0.1",
    packages=find_packages(),
    description="Combine text files into one marker-framed stream and separate them again.",
    author="vercingetorx",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "biner=biner.cli:main",
        ]
    },
)
