"""Core output dispatchers."""

import json


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="json"):
    """Output data in requested format. Table output falls back to JSON
    when the command has no table formatter or the result is not a list."""
    if fmt == "table" and formatter and isinstance(data, list):
        print(formatter(data))
    else:
        pretty_print(data)
