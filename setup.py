from pathlib import Path

from setuptools import find_packages, setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

CAS_VERSION = (this_directory / "VERSION").read_text().strip()

install_requires = [
    "requests",
    "schema",
    "typer",
    "typer-config[yaml]",
    "typing-extensions",
]

tests_require = [
    "pytest",
    "pyfakefs",
    "responses",
    "unittest-parametrize",
]

setup(
    name="cas_tool",
    version=CAS_VERSION,
    packages=find_packages(exclude=["tests", "tests.*"]),
    license="AGPL-3.0",
    description="Command line interface for querying and feeding a Cloud App Security tenant.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="CAS Tool Authors",
    keywords=["Security", "CLI"],
    entry_points={"console_scripts": ["cas=cas_tool.main:run"]},
    install_requires=install_requires,
    extras_require={"test": tests_require},
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Security",
        "License :: OSI Approved :: GNU Affero General Public License v3",
        "Programming Language :: Python :: 3.10",
    ],
    include_package_data=True,
)
