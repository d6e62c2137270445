from setuptools import setup, find_packages

setup(
    name="credence",
    version="1.0.0",
    description="Adaptive news credibility scoring: concurrent heuristic analyzers, weighted verdicts and feedback-driven weights, with CLI.",
    author="Raiff1982",
    packages=find_packages(),
    install_requires=[
        "nltk",
        "rapidfuzz",
        "filelock",
        "numpy"
    ],
    extras_require={
        "test": [
            "pytest"
        ]
    },
    python_requires='>=3.8',
    entry_points={
        "console_scripts": [
            "credence-scan=credence.credence_scan:main"
        ]
    },
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
