""" Utility functions of hdfsufs. """
