from setuptools import find_packages, setup

setup(
    name="mview",
    version="0.1.0",
    description="Selector-style view markup translated into Python view builder calls.",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"mview": ["templates/*.jinja"]},
    include_package_data=True,
    install_requires=[
        "jinja2>=3.1",
        "rich>=13.0",
        "rich-click>=1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mview=mview.cli.main:cli",
        ],
    },
    zip_safe=False,
)
