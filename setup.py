# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="sketchpad",
    version="1.0.0",
    description="Multi-file p5.js sketch workspace: virtual file tree, undo history and preview bundler",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["sketchpad*"]),
    python_requires=">=3.9",
    install_requires=[
        "google-genai",  # Gemini provider for the sketch assistant
        "anthropic",  # Claude provider for the sketch assistant
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'sketchpad=sketchpad.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
