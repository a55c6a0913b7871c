import os

from setuptools import setup, find_packages

version_file = os.path.join(os.path.dirname(__file__), "media_decoders", "version.py")
with open(version_file, "r") as f:
    exec(f.read())

readme_file = os.path.join(os.path.dirname(__file__), "README.md")
with open(readme_file, "r") as f:
    long_description = f.read()

setup(
    name="media_decoders",
    version=__version__,  # noqa: F821 -- loaded by 'exec' above
    packages=find_packages(include=["media_decoders", "media_decoders.*"]),
    include_package_data=True,
    description="Validating decoders for WAVE audio, PNG images and DDS textures.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Operating System :: POSIX :: Linux",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Topic :: Multimedia :: Graphics",
        "Topic :: Multimedia :: Sound/Audio",
    ],
    keywords="wave wav png dds s3tc dxt decoder",
    python_requires=">=3.7",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": [
            "pytest",
            "mock",
            "pillow",
        ],
    },
    entry_points={
        "console_scripts": [
            "media-asset-validator=media_decoders.scripts.media_asset_validator:main",
        ],
    },
)
