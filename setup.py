from setuptools import setup, find_packages

setup(
    name="trapezoidal",
    version="0.1.0",
    description="Parallel composite trapezoidal integration with thread and pool strategies",
    author="adamfilli",
    packages=find_packages(include=["trapezoidal", "trapezoidal.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.10",
)
