[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labquest"
version = "0.1.0"
description = "Small networked and shared-state terminal programs: an image relay, a delivery dispatcher, a dungeon RPG and a hunter arena"
requires-python = ">=3.10"
dependencies = [
    "filelock",
]
keywords = ["game", "dungeon", "rpg", "sockets", "delivery", "terminal"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
labquest-image-server = "labquest.image_server:main"
labquest-image-client = "labquest.image_client:main"
labquest-delivery-agent = "labquest.delivery_agent:main"
labquest-dispatcher = "labquest.dispatcher:main"
labquest-dungeon = "labquest.dungeon:main"
labquest-player = "labquest.player:main"
labquest-hunter = "labquest.hunter_menu:main"
labquest-system = "labquest.system_menu:main"

[tool.hatch.build.targets.wheel]
packages = ["labquest"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
