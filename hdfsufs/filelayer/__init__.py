""" Under filesystem abstraction and its HDFS implementation. """
