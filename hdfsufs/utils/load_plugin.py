"""
Plugin Loader Utilities for hdfsufs.

This module provides an utility function to dynamically load plugin classes
from entry points defined in `pyproject.toml`.

It enables flexible configuration of pluggable components such as:
  - Filesystem clients (entry point group: `hdfsufs.clients`)

Plugins are selected by the `client_impl` field of the under storage
configuration.

Example:
    .. code-block:: python

        from hdfsufs.utils.load_plugin import load_plugin

        client_cls = load_plugin("hdfsufs.clients", "webhdfs")
        client = client_cls(config, options)

Raises:
    ValueError: If no matching plugin is found for the given group and name.
"""

from importlib.metadata import entry_points


def load_plugin(group: str, name: str):
    """
    Load a plugin class or factory function from entry points.

    Args:
        group (str): Entry point group name.
        name (str): Name of the registered plugin.

    Returns:
        The loaded plugin object (class or function).
    """
    eps = entry_points().select(group=group)
    for ep in eps:
        if ep.name == name:
            return ep.load()

    raise ValueError(f"No entry point named '{name}' found in group '{group}'")
