import json
import unittest
import os
import tempfile

from .. import config as cfg


class ConfigTest(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.config_file = os.path.join(self.tmpdir.name, "config.json")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_defaults(self):
        with open(self.config_file, "w") as fp:
            json.dump({}, fp)
        config_dict = cfg.read_config(self.config_file)
        self.assertEqual(config_dict, cfg.DEFAULT)
        self.assertEqual(config_dict["potential"]["angular_form"], "g5")
        self.assertEqual(config_dict["evaluation"]["cores"], 1)
        # the defaults themselves are never modified
        config_dict["potential"]["cutoff"] = 1.0
        self.assertIsNone(cfg.DEFAULT["potential"]["cutoff"])

    def test_partial_file(self):
        with open(self.config_file, "w") as fp:
            json.dump({"potential": {"cutoff": 6.5}}, fp)
        config_dict = cfg.read_config(self.config_file)
        self.assertEqual(config_dict["potential"]["cutoff"], 6.5)
        self.assertEqual(config_dict["potential"]["on_violation"], "raise")
        self.assertTrue(config_dict["evaluation"]["progress"])

    def test_write_and_merge(self):
        cfg.write_config({"potential": {"path": "/tmp/pot"}},
                         config_file=self.config_file)
        cfg.write_config({"potential": {"cutoff": 5.0}},
                         config_file=self.config_file)
        potential = cfg.read("potential", config_file=self.config_file)
        self.assertEqual(potential["path"], "/tmp/pot")
        self.assertEqual(potential["cutoff"], 5.0)
        self.assertTrue(os.path.exists(self.config_file + ".bak"))

    def test_replace(self):
        cfg.write_config({"potential": {"path": "/tmp/pot"}},
                         config_file=self.config_file)
        cfg.write_config({"potential": {"cutoff": 5.0}},
                         config_file=self.config_file, replace=True)
        potential = cfg.read("potential", config_file=self.config_file)
        self.assertIsNone(potential["path"])

    def test_unknown_setting(self):
        cfg.write_config({"unknown": 1, "evaluation": {"cores": 4}},
                         config_file=self.config_file)
        with open(self.config_file) as fp:
            self.assertNotIn("unknown", json.load(fp))

    def test_read_multiple(self):
        with open(self.config_file, "w") as fp:
            json.dump({"evaluation": {"cores": 3}}, fp)
        potential, evaluation = cfg.read(["potential", "evaluation"],
                                         config_file=self.config_file)
        self.assertIn("cutoff", potential)
        self.assertEqual(evaluation["cores"], 3)
        with self.assertRaises(KeyError):
            cfg.read("nothing", config_file=self.config_file)


if __name__ == "__main__":
    unittest.main()
