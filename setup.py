from setuptools import setup, find_packages

setup(
    name="skillsweeper",
    version="0.1",
    packages=find_packages(include=["skillsweeper", "skillsweeper.*", "frontend", "frontend.*"]),
    install_requires=[
        "flask",
        "pyyaml",
        "numpy"
    ],
    extras_require={
        "test": ["pytest"]
    },
    entry_points={
        "console_scripts": [
            "skillsweeper-ui=frontend.app:main"
        ]
    },
)
