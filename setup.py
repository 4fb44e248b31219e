from os import path

from setuptools import find_namespace_packages, setup

requires = [
    "colorlog~=6.4",
    "more-itertools>=8,<11",
    "ply~=3.0",
    "pydantic~=2.5",
    "pyyaml~=6.0",
]


# read the contents of your README file
this_directory = path.abspath(path.dirname(__file__))
with open(path.join(this_directory, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

version = "1.0.0"

setup(
    version=version,
    python_requires=">=3.11",  # also update classifiers
    # Meta data
    name="netalloc",
    description="Allocation registry for 802.1Q VLAN ids with label-based queries",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Inmanta",
    author_email="code@inmanta.com",
    license="Apache Software License 2",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Intended Audience :: Telecommunications Industry",
        "Operating System :: POSIX :: Linux",
        "Topic :: System :: Networking",
        "Topic :: Utilities",
        "Programming Language :: Python :: 3.11",
    ],
    keywords="vlan allocation orchestration network-automation",
    # Packaging
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    zip_safe=False,
    include_package_data=True,
    install_requires=requires,
    extras_require={
        "dev": ["pytest"],
    },
)
