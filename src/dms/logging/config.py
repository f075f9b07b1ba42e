import os
from importlib.resources import files
from pathlib import Path

import yaml


def load_named_config(name: str):
    """
    Loads a logging configuration, given either the *name* of a built-in configuration (``default`` or ``json``) or
    the path of a YAML file.
    """
    if name.endswith((".yaml", ".yml")):
        with Path(name).open("r") as file:
            return load_config(file)

    return load_stock_config(name)


def load_stock_config(name="default"):
    """
    Loads a built-in stock logging configuration based on *name*.
    """
    with files(__package__).joinpath(f"configurations/{name}.yaml").open("r") as file:
        return load_config(file)


def load_config(config):
    """
    Loads a given logging *config* written in YAML, either as a string or an open file object.
    """
    return yaml.load(config, Loader=LogConfigLoader)


class LogConfigLoader(yaml.SafeLoader):
    """
    A :py:class:`yaml.SafeLoader` understanding two local tags.

    ``!LOG_LEVEL`` is replaced by the uppercased value of the ``LOG_LEVEL`` environment variable, or ``None``
    when it is unset. ``!coalesce`` applied to a sequence produces its first item that is not ``None``.

    >>> os.environ["LOG_LEVEL"] = "info"
    >>> yaml.load("level: !LOG_LEVEL", Loader = LogConfigLoader)
    {'level': 'INFO'}

    >>> del os.environ["LOG_LEVEL"]
    >>> yaml.load('''
    ... level: !coalesce
    ...   - !LOG_LEVEL
    ...   - WARNING
    ... ''', Loader = LogConfigLoader)
    {'level': 'WARNING'}
    """


def log_level_constructor(loader, node):
    level = os.environ.get("LOG_LEVEL")
    return level.upper() if level else None


def coalesce_constructor(loader, node):
    return next((value for value in loader.construct_sequence(node) if value is not None), None)


LogConfigLoader.add_constructor("!LOG_LEVEL", log_level_constructor)
LogConfigLoader.add_constructor("!coalesce", coalesce_constructor)
