[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fotopaint"
version = "0.1.0"
description = "A raster photo workspace with mouse-driven painting tools and image primitives"
requires-python = ">=3.10"
keywords = [
    "image",
    "photo",
    "raster",
    "painting",
    "drawing",
    "blur",
    "perspective",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Editors :: Raster-Based",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "scipy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["fotopaint"]

[tool.pytest.ini_options]
addopts = "-ra"
