"""
Command line: exit codes, option mapping, end-to-end file output.
"""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from network_rank.cli import build_parser, main, options_from_args
from network_rank.plot_config import Smoothing, TimestampPrecision


LOG = "Mon, 05 Jan 2009\n10 out of 200\nnoise\nTue, 06 Jan 2010\n5 out of 2,00\n"


def run(argv):
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        rc = main(argv)
    return rc, out.getvalue(), err.getvalue()


class TestOptionMapping(unittest.TestCase):

    def test_defaults(self):
        opts = options_from_args(build_parser().parse_args([]))
        self.assertFalse(opts.show_totals)
        self.assertIsNone(opts.png)
        self.assertIsNone(opts.svg)
        self.assertIs(opts.smoothing, Smoothing.CSPLINES)
        self.assertIs(opts.timestamp_precision, TimestampPrecision.DATE)

    def test_png_without_filename_uses_default(self):
        opts = options_from_args(build_parser().parse_args(["-p"]))
        self.assertEqual(opts.png, "network-rank.png")

    def test_curve_none_disables_smoothing(self):
        opts = options_from_args(build_parser().parse_args(["-c", "none"]))
        self.assertIsNone(opts.smoothing)

    def test_flags(self):
        args = build_parser().parse_args(
            ["-t", "-g", "x.svg", "-d", "log.txt", "--precision", "datetime", "--strict"]
        )
        opts = options_from_args(args)
        self.assertTrue(opts.show_totals)
        self.assertEqual(opts.svg, "x.svg")
        self.assertEqual(opts.source, "log.txt")
        self.assertIs(opts.timestamp_precision, TimestampPrecision.DATETIME)
        self.assertTrue(opts.strict)


class TestExitCodes(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.log = os.path.join(self.tmp.name, "network-rank")
        with open(self.log, "w", encoding="utf-8") as f:
            f.write(LOG)

    def test_bad_flag_exits_1(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["--no-such-flag"])
        self.assertEqual(ctx.exception.code, 1)

    def test_bad_curve_exits_1(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["-c", "wiggly"])
        self.assertEqual(ctx.exception.code, 1)

    def test_png_and_svg_conflict_exits_1_before_reading(self):
        rc, _out, err = run(["-p", "-g", "-d", os.path.join(self.tmp.name, "absent")])
        self.assertEqual(rc, 1)
        self.assertIn("mutually exclusive", err)
        self.assertIn("usage:", err)

    def test_missing_source_exits_2(self):
        rc, _out, err = run(["-p", "x.png", "-d", os.path.join(self.tmp.name, "absent")])
        self.assertEqual(rc, 2)
        self.assertIn("[ERROR]", err)

    def test_unpaired_exits_2(self):
        with open(self.log, "a", encoding="utf-8") as f:
            f.write("Wed, 07 Jan 2010\n")
        rc, _out, err = run(["-p", os.path.join(self.tmp.name, "r.png"), "-d", self.log])
        self.assertEqual(rc, 2)
        self.assertIn("unpaired", err)

    def test_strict_malformed_exits_2(self):
        with open(self.log, "a", encoding="utf-8") as f:
            f.write("Wed, 07 Jan 2010\n1 out of 0\n")
        rc, _out, _err = run(["--strict", "-p", os.path.join(self.tmp.name, "r.png"), "-d", self.log])
        self.assertEqual(rc, 2)

    def test_svg_and_csv_written(self):
        svg = os.path.join(self.tmp.name, "rank.svg")
        csv_path = os.path.join(self.tmp.name, "rank.csv")
        rc, out, _err = run(["-t", "-g", svg, "--csv", csv_path, "-d", self.log])
        self.assertEqual(rc, 0)
        self.assertTrue(os.path.isfile(svg))
        self.assertTrue(os.path.isfile(csv_path))
        self.assertIn("parsed 2 samples", out)
        self.assertIn("years=varies", out)

    def test_malformed_line_is_skipped(self):
        with open(self.log, "a", encoding="utf-8") as f:
            f.write("3 out of 0\n")
        rc, out, err = run(["-p", os.path.join(self.tmp.name, "r.png"), "-d", self.log])
        self.assertEqual(rc, 0)
        self.assertIn("malformed skipped=1", out)
        self.assertIn("[WARN]", err)

    def test_zero_total_skips_its_pair_and_run_continues(self):
        with open(self.log, "a", encoding="utf-8") as f:
            f.write("Wed, 07 Jan 2010\n3 out of 0\nThu, 08 Jan 2010\n1 out of 4\n")
        rc, out, _err = run(["-p", os.path.join(self.tmp.name, "r.png"), "-d", self.log])
        self.assertEqual(rc, 0)
        self.assertIn("parsed 3 samples", out)
        self.assertIn("partners dropped=1", out)

    def test_unwritable_csv_exits_2(self):
        png = os.path.join(self.tmp.name, "r.png")
        rc, _out, err = run(["-p", png, "--csv", self.tmp.name, "-d", self.log])
        self.assertEqual(rc, 2)
        self.assertIn("[ERROR] cannot write", err)

    def test_source_is_closed_when_parsing_fails(self):
        state = {"closed": False}

        def lines():
            try:
                yield "Mon, 05 Jan 2009\n"
                yield "1 out of 0\n"
                yield "2 out of 4\n"
            finally:
                state["closed"] = True

        with mock.patch("network_rank.cli.open_lines", return_value=lines()):
            rc, _out, _err = run(["--strict", "-p", os.path.join(self.tmp.name, "r.png")])
        self.assertEqual(rc, 2)
        self.assertTrue(state["closed"])

    def test_empty_log_exits_0(self):
        empty = os.path.join(self.tmp.name, "empty")
        open(empty, "w").close()
        rc, out, _err = run(["-p", os.path.join(self.tmp.name, "e.png"), "-d", empty])
        self.assertEqual(rc, 0)
        self.assertIn("parsed 0 samples", out)


if __name__ == "__main__":
    unittest.main()
