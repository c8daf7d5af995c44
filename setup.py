from setuptools import setup, find_packages

setup(
    name="gitlab-updater",
    version="1.0.0",
    packages=find_packages(include=["gitlab_updater", "gitlab_updater.*"]),
    py_modules=["main"],
    python_requires=">=3.10",
    install_requires=[
        "click",
        "httpx",
        "packaging",
        "pydantic>=2",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "gitlab-updater=gitlab_updater.cli.cli:main",
        ],
    },
)
