from pathlib import Path

from setuptools import find_namespace_packages, setup

# Load packages from requirements.txt
BASE_DIR = Path(__file__).parent
with open(Path(BASE_DIR, "requirements.txt")) as file:
    required_packages = [ln.strip() for ln in file.readlines() if ln.strip()]

# Define our package
setup(
    name="adaptive-quiz-client",
    version="0.1",
    description="Adaptive quiz client with per-tag mastery tracking on a hosted backend",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["src", "src.*"]),
    install_requires=required_packages,
    extras_require={
        "test": ["pytest>=7.0"],
        "dev": ["pytest>=7.0", "pre-commit==2.19.0"],
    },
)
