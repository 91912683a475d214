# SPDX-License-Identifier: LGPL-3.0-or-later
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock

from vsphere_provider.core.exceptions import Fatal
from vsphere_provider.core.utils import U, boolish, string_set


class TestUtilsFileOperations(unittest.TestCase):
    """Test utility file operations."""

    def test_ensure_dir_creates_directory(self):
        with tempfile.TemporaryDirectory() as td:
            new_dir = Path(td) / "subdir" / "nested"

            U.ensure_dir(new_dir)

            self.assertTrue(new_dir.is_dir())

    def test_atomic_write_replaces_content(self):
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "state" / "file.json"
            U.atomic_write_text(target, "one")
            U.atomic_write_text(target, "two")

            self.assertEqual(target.read_text(encoding="utf-8"), "two")
            self.assertEqual([p.name for p in target.parent.iterdir()], ["file.json"])


class TestUtilsHelpers(unittest.TestCase):
    def test_die_logs_and_raises(self):
        logger = Mock()
        with self.assertRaises(Fatal) as ctx:
            U.die(logger, "Config file not found: x.yaml", 2)
        self.assertEqual(ctx.exception.code, 2)
        logger.error.assert_called_once_with("Config file not found: x.yaml")

    def test_json_dump_sorted(self):
        self.assertEqual(json.loads(U.json_dump({"b": 1, "a": Path("/x")})), {"a": "/x", "b": 1})

    def test_boolish(self):
        for v in (True, "1", "yes", "TRUE", " on "):
            self.assertTrue(boolish(v), v)
        for v in (False, None, "", "0", "off", "nope"):
            self.assertFalse(boolish(v), v)

    def test_string_set(self):
        self.assertEqual(string_set(["b", "a", "b", "", None]), ["a", "b"])
        self.assertEqual(string_set("only"), ["only"])
        self.assertEqual(string_set(None), [])


if __name__ == "__main__":
    unittest.main()
