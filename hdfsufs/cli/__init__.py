""" Command line interface of hdfsufs. """
