"""
Setup script for the Aib HUB backend
"""
from setuptools import setup, find_packages

setup(
    name="aib-hub",
    version="0.1.0",
    description="Creator marketplace backend: directory, job briefs, memberships and outreach",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"aib_hub": ["data/*.yaml"]},
    include_package_data=True,
    python_requires=">=3.10,<3.14",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "sqlalchemy>=2.0",
        "alembic>=1.13",
        "psycopg2-binary>=2.9",
        "pydantic>=2.5",
        "email-validator>=2.1",
        "python-jose[cryptography]>=3.3",
        "bcrypt>=4.1",
        "python-dotenv>=1.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
)
