import contextlib
import io
import unittest

from configguard import __version__
from configguard.errors import CliError
from configguard.parser import build_arg_parser, parse_args
from tests._util import tmp_dir, write


class ParserTests(unittest.TestCase):
    def test_defaults(self):
        args = parse_args(["validate", "c.yaml", "-s", "s.yaml"])
        self.assertEqual(args.command, "validate")
        self.assertEqual(args.config, ["c.yaml"])
        self.assertEqual(args.schema, "s.yaml")
        self.assertEqual(args.format, "text")
        self.assertFalse(args.strict)
        self.assertFalse(args.directory)
        self.assertIsNone(args.output)
        self.assertTrue(args.annotate_lines)
        self.assertFalse(args.verbose)

    def test_all_flags(self):
        args = parse_args([
            "validate", "a", "b", "--schema", "s.yaml", "--format", "json",
            "--strict", "--directory", "--output", "out.json", "--no-lines", "-v",
        ])
        self.assertEqual(args.config, ["a", "b"])
        self.assertEqual(args.format, "json")
        self.assertTrue(args.strict and args.directory and args.verbose)
        self.assertEqual(args.output, "out.json")
        self.assertFalse(args.annotate_lines)

    def test_arguments_from_file(self):
        with tmp_dir() as d:
            argfile = write(d, "args.txt", "validate\nc.yaml\n-s\ns.yaml\n--strict\n")
            args = parse_args([f"@{argfile}"])
        self.assertEqual(args.config, ["c.yaml"])
        self.assertTrue(args.strict)

    def test_misuse_raises_cli_error(self):
        for argv in ([], ["validate", "c.yaml"], ["validate", "-s", "s.yaml"],
                     ["validate", "c.yaml", "-s", "s", "-f", "xml"], ["lint"]):
            with self.subTest(argv=argv):
                with self.assertRaises(CliError) as cm:
                    parse_args(argv)
                self.assertEqual(cm.exception.exit_code, 20)

    def test_version(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out), self.assertRaises(SystemExit) as cm:
            build_arg_parser().parse_args(["--version"])
        self.assertEqual(cm.exception.code, 0)
        self.assertEqual(out.getvalue().strip(), f"configguard {__version__}")


if __name__ == "__main__":
    unittest.main()
