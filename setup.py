"""
Setup script for quiz-grading.

The answer evaluation and auto-grading engine of the quiz platform. Given a
question's correct-answer definition and a learner's answer, it decides
correctness, computes a (possibly partial) score and explains it.

Persistence, HTTP and the quiz UI live in the calling services.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="quiz-grading",
    version="1.0.0",
    description="Answer evaluation and auto-grading engine for quiz responses",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Quiz Platform",
    packages=find_namespace_packages(include=["src", "src.grading*", "src.integrations*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # Config & Validation
        "pydantic>=2.5.0",
        "pydantic-settings>=2.0.0",
        # HTTP (code execution sandbox)
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Testing",
    ],
    keywords="quiz grading assessment education auto-grading",
)
