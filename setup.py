"""
Setup file.
"""

from setuptools import find_packages, setup

KEYWORDS = "c3 c3c compiler ffi build-script static-library toolchain"


if __name__ == "__main__":
    setup(
        name="c3ffi",
        version="0.1.0",
        description="Build C3 libraries with c3c from another project's build step",
        keywords=KEYWORDS,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=[],
        extras_require={"test": ["pytest>=7"]},
        entry_points={"console_scripts": ["c3ffi=c3ffi.cli:main"]},
        include_package_data=True)
