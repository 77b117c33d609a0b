from setuptools import setup, find_packages
import os

install_requires = [
    "pyrsistent>=0.19",
]

# Read long description from MANUAL.md if available
long_description = ""
long_description_ct = "text/markdown"
manual_path = os.path.join(os.path.dirname(__file__), "MANUAL.md")
if os.path.exists(manual_path):
    with open(manual_path, "r", encoding="utf-8") as fh:
        long_description = fh.read()

setup(
    name="violet-syntax",
    version="0.1.0",
    description="Permissive reader for a minimal Lisp-like surface syntax",
    long_description=long_description,
    long_description_content_type=long_description_ct,
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require={
        "test": ["pytest>=7"],
    },
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "violet=violet.vrepl:main",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Compilers",
    ],
)
