import unittest as test

from conflux.raid.ids import raid_id_parts

class TestRAiDIDParts(test.TestCase):

    def test_split(self):
        self.assertEqual(raid_id_parts("https://raid.org/10.25.10.1234/a1b2c"),
                         ("10.25.10.1234", "a1b2c"))
        self.assertEqual(raid_id_parts("https://raid.org/10.0.0.0/375234214"),
                         ("10.0.0.0", "375234214"))

    def test_trailing_slash(self):
        self.assertEqual(raid_id_parts("https://raid.org/10.25.10.1234/a1b2c/"),
                         ("10.25.10.1234", "a1b2c"))

    def test_no_host(self):
        self.assertEqual(raid_id_parts("10.25.10.1234/a1b2c"), ("10.25.10.1234", "a1b2c"))

    def test_bad(self):
        for bad in ["https://raid.org/a1b2c", "https://raid.org/", "https://raid.org", "", None]:
            with self.assertRaises(ValueError):
                raid_id_parts(bad)


if __name__ == '__main__':
    test.main()
