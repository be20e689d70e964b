from setuptools import setup, find_packages

setup(
    name="fieldrules-lib",
    version="0.1.0",
    description="Declarative field validation with pipe-delimited rule expressions",
    author="Jude Payne",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        'fieldrules': ['local-config.yaml'],
    },
    include_package_data=True,
    install_requires=[
        'pyyaml>=6.0',
        'jsonschema>=4.17.0',
        'requests>=2.28.0',
        'email-validator>=2.0',
        'python-dateutil>=2.8',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.9',
)
