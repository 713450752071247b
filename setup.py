from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()

requirements = [
    "rich>=13.0.0",
    "PyYAML>=6.0.3",
    "python-dotenv>=1.0.0",
]

setup(
    name="clearance",
    version="0.1.0",
    author="Clearance",
    description="A lightweight CLI tool to clean up development caches",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["clearance", "clearance.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: Apache Software License",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Topic :: System :: Filesystems",
        "Topic :: Utilities",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "clearance=clearance.cli:main",
        ],
    },
    include_package_data=True,
)
