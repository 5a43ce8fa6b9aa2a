[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "userauth"
version = "0.1.0"
description = "A gRPC user account service over a DB-API SQL connection"
requires-python = ">=3.10"
keywords = ["grpc", "users", "accounts", "sql", "service"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration :: Authentication/Directory",
]
dependencies = [
    "python-dotenv",
    "grpcio",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
userauth = "userauth.app:main"

[tool.hatch.build.targets.wheel]
packages = ["userauth"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
