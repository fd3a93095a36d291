import setuptools

with open("readme.md", "r") as fh:
    long_description = fh.read()

with open('requirements.txt') as f:
    requirements = f.read().splitlines()

setuptools.setup(
    name="vidshare",
    version="1.0.0",
    description="Video sharing REST backend over SQL or MongoDB storage",
    license="MIT License",
    install_requires=requirements,
    extras_require={
        "test": ["pytest", "mongomock"],
    },
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    zip_safe=False,
    entry_points={
        "console_scripts": ["vidshare=vidshare.cli:app"],
    },
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires='>=3.11',
)
