import os

from setuptools import setup

# read the version info without importing the package (its dependencies aren't installed at build time)
about = {}
with open(os.path.join("localsqs", "__version__.py"), encoding="utf-8") as f:
    exec(f.read(), about)

readme_file_path = os.path.join("readme.md")

with open(readme_file_path, encoding="utf-8") as f:
    long_description = "\n" + f.read()

setup(
    name=about["__title__"],
    description=about["__description__"],
    long_description=long_description,
    long_description_content_type="text/markdown",
    version=about["__version__"],
    author=about["__author__"],
    license="MIT License",
    keywords=["aws", "sqs", "localstack", "testing", "docker"],
    packages=[about["__title__"]],
    python_requires=">=3.9",
    install_requires=["boto3", "typeguard", "tobool", "balsa", "requests", "docker", "testcontainers"],
    extras_require={"test": ["pytest", "moto[sqs]"], "examples": ["ismain"]},
    classifiers=[],
)
