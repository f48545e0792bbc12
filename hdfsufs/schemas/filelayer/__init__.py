""" Configuration schemas of the under storage backends. """
