"""
hdfsufs Command Line Interface.

Usage: ufs [OPTIONS] COMMAND [ARGS]...
Help: ufs --help


Becomes available after installing hdfsufs (after cloning the repository locally) like

> pip install .

or (during development)

> pip install -e .
"""

from hdfsufs.cli.cli import cli


def main():
    """ Command line interface of hdfsufs. """
    cli(obj={})


if __name__ == '__main__':
    main()
