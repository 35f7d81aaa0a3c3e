[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "humptykit"
version = "0.1.0"
description = "Building blocks for a small threaded HTTP server: headers, methods, cookies, socket connectors and static file endpoints."
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "headers", "cookies", "connector", "static-files", "tls", "unix-socket"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["humptykit"]

[tool.pytest.ini_options]
addopts = "-ra"
