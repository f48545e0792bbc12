""" Identities and secure execution of under filesystem operations. """
