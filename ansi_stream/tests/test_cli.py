import contextlib
import io
import json
import os
from pathlib import Path
import tempfile
import unittest
from unittest.mock import patch

from ansi_stream import cli

SAMPLE = "\x1b[31mred\x1b[0m ok"


class ConvertTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "out.log"
        self.path.write_text(SAMPLE, encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = cli.main(list(argv))
        return code, out.getvalue()

    def test_html(self):
        code, output = self._run("convert", str(self.path))
        self.assertEqual(code, 0)
        self.assertEqual(
            output,
            '<pre class="ansi"><span style="color: #aa0000">red</span><span> ok</span></pre>\n',
        )

    def test_json_lines_with_small_chunks(self):
        code, output = self._run("convert", str(self.path), "--format", "json", "--chunk-size", "2")
        self.assertEqual(code, 0)
        rows = [json.loads(line) for line in output.splitlines()]
        self.assertEqual("".join(row["text"] for row in rows), "red ok")
        self.assertEqual(rows[0]["fg"], {"type": "16", "code": 1})
        self.assertNotIn("fg", rows[-1])

    def test_missing_file(self):
        err = io.StringIO()
        with contextlib.redirect_stderr(err):
            code, output = self._run("convert", str(self.path) + ".missing")
        self.assertEqual(code, 1)
        self.assertEqual(output, "")
        self.assertIn("cannot read", err.getvalue())

    def test_stdin_keeps_carriage_returns(self):
        self.path.write_bytes(b"a\r\nb\rc")
        stdin = io.TextIOWrapper(io.BytesIO(b"a\r\nb\rc"), encoding="utf-8")
        with patch("sys.stdin", stdin):
            _, from_stdin = self._run("convert", "-", "--format", "json")
        _, from_file = self._run("convert", str(self.path), "--format", "json")
        self.assertEqual(from_stdin, from_file)
        self.assertEqual(json.loads(from_stdin), {"text": "a\r\nb\rc"})

    def test_convert_stream_directly(self):
        out = io.StringIO()
        cli.convert(io.StringIO(SAMPLE), out, "json", 1)
        rows = [json.loads(line) for line in out.getvalue().splitlines()]
        self.assertEqual([row["text"] for row in rows], ["r", "e", "d", " ", "o", "k"])


class ServeTests(unittest.TestCase):
    def test_refuses_placeholder_token(self):
        err = io.StringIO()
        with patch.dict(os.environ, {"ANSI_STREAM_TOKEN": "changeme"}), contextlib.redirect_stderr(err):
            self.assertEqual(cli.main(["serve"]), 1)
        self.assertIn("FATAL", err.getvalue())

    def test_runs_uvicorn(self):
        env = {"ANSI_STREAM_TOKEN": "secret", "ANSI_STREAM_PORT": "9001"}
        with patch.dict(os.environ, env), patch("uvicorn.run") as run_mock:
            self.assertEqual(cli.main(["serve", "--host", "0.0.0.0"]), 0)
        run_mock.assert_called_once()
        _, kwargs = run_mock.call_args
        self.assertEqual(kwargs["host"], "0.0.0.0")
        self.assertEqual(kwargs["port"], 9001)
        self.assertEqual(kwargs["log_level"], "info")


if __name__ == "__main__":
    unittest.main()
