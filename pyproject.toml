[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dalfox"
version = "2.0.0"
description = "XSS scanning service support: WAF fingerprinting, HTTP transports, a REST API and a stdio tool server"
requires-python = ">=3.10"
keywords = ["xss", "security", "scanner", "waf", "rest-api", "json-rpc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "flask",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
dalfox-server = "dalfox.server:main"

[tool.hatch.build.targets.wheel]
packages = ["dalfox"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
