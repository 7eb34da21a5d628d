from setuptools import setup, find_packages

setup(
    name="tinymedia",
    version="0.1.0",
    description="Read and edit vendor metadata stored in JPEG marker segments",
    url="https://github.com/zzvanq/tinymedia",

    package_dir={"": "src"},
    packages=find_packages(where="src"),

    install_requires=[
        "click>=8.1.0",
        "structlog>=23.1.0",
    ],

    extras_require={
        "dev": [
            "pytest>=7.3.0",
            "pytest-cov>=4.0.0",
            "black>=23.3.0",
            "mypy>=1.3.0",
            "ruff>=0.0.270",
        ],
    },

    entry_points={
        "console_scripts": [
            "tinymedia=tinymedia.cli.main:cli",
        ],
    },

    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
    ],
)
