import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="smart_enum_codegen",
    version="1.0.0",
    description="Incremental C# source generator for Ardalis.SmartEnum-style smart enumerations",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Intended Audience :: Developers",
    ],
    keywords="csharp source generator smart enum code generation",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
        "tree-sitter>=0.22.0",
        "tree-sitter-c-sharp>=0.21.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "smart_enum_codegen=smart_enum_codegen.smart_enum_codegen:smart_enum_codegen",
        ],
    },
    include_package_data=True,
    package_data={
        "smart_enum_codegen": ["templates/**/*.jinja2"],
    },
    zip_safe=False,
)
