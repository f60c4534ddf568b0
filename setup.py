from setuptools import setup, find_namespace_packages

setup(
    name="bus-pipeline",
    version="0.1.0",
    description="Elastic valid/ready pipelines and bus channel retiming in Amaranth HDL",
    python_requires=">=3.9",
    install_requires=[
        "amaranth>=0.5,<0.6",
    ],
    extras_require={
        "test": ["pytest"],
    },
    packages=find_namespace_packages(include=["bus_pipeline", "bus_pipeline.*"]),
)
