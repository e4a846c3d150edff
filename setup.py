from setuptools import setup, find_packages

setup(
    name="kubegreen",
    version="0.1.0",
    description="Kubernetes Waste Auditor - Find unused requests and orphaned storage in a namespace",
    packages=find_packages(include=["kubegreen", "kubegreen.*"]),
    install_requires=[
        "kubernetes>=29.0.0",
        "urllib3>=1.26.0",
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",
        "typer>=0.9.0",
        "rich>=13.7.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.26.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kubegreen=kubegreen.cli:app",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
