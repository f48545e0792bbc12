import unittest
from pydantic import ValidationError
from hdfsufs.schemas.security import SecurityConfig


class TestSecurityConfig(unittest.TestCase):
    """
    Unit tests for class SecurityConfig
    """

    def test_empty(self):
        """ Test that no role is configured by default """
        conf = SecurityConfig()
        self.assertIsNone(conf.keytab_and_principal("master"))
        self.assertIsNone(conf.keytab_and_principal("worker"))

    def test_roles(self):
        """ Test that each role gets its own keytab and principal """
        conf = SecurityConfig(
            master_keytab_file=" /etc/m.keytab ", master_principal="m/_HOST@R",
            worker_keytab_file="/etc/w.keytab", worker_principal="w/_HOST@R"
        )
        self.assertEqual(conf.keytab_and_principal("master"), ("/etc/m.keytab", "m/_HOST@R"))
        self.assertEqual(conf.keytab_and_principal("worker"), ("/etc/w.keytab", "w/_HOST@R"))

    def test_partial(self):
        """ Test that a role missing keytab or principal is not configured """
        self.assertIsNone(SecurityConfig(master_keytab_file="/k").keytab_and_principal("master"))
        self.assertIsNone(SecurityConfig(master_principal="p@R").keytab_and_principal("master"))
        self.assertIsNone(SecurityConfig(master_keytab_file="", master_principal="p@R").keytab_and_principal("master"))

    def test_unknown_role(self):
        """ Test that unknown roles raise ValueError """
        with self.assertRaises(ValueError):
            SecurityConfig().keytab_and_principal("client")

    def test_extra_field_forbidden(self):
        """ Test that unknown fields are rejected """
        with self.assertRaises(ValidationError):
            SecurityConfig(master_keytab="/k")
