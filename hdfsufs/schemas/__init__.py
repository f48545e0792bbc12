""" Configuration schemas of the hdfsufs adapter. """
