from setuptools import setup, find_packages

setup(
    name="fixed_income_tracker",
    version="0.1.0",
    description="Fixed income position tracker: future value projection and issuer guarantee exposure",
    packages=find_packages(include=["fixed_income_tracker", "fixed_income_tracker.*"]),
    install_requires=[
        "numpy",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
)
