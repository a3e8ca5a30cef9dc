import io
from pathlib import Path
from types import SimpleNamespace

import pytest

from riuos_installer import logging_utils
from riuos_installer.config import DEFAULTS, InstallConfig, deep_merge
from riuos_installer.context import InstallCtx
from riuos_installer.lib import command


class ProcRecorder:
    """Stands in for subprocess.Popen inside run_cmd."""

    def __init__(self):
        self.calls = []
        self._responses = []

    def respond(self, fragment, output="", returncode=0):
        """Answer commands whose argv contains fragment (contiguous)."""
        self._responses.append((list(fragment), output, returncode))

    def _lookup(self, argv):
        for fragment, output, returncode in self._responses:
            n = len(fragment)
            if any(argv[i : i + n] == fragment for i in range(len(argv) - n + 1)):
                return output, returncode
        return "", 0

    def popen(self, argv, stdin=None, stdout=None, stderr=None, text=None, cwd=None, env=None):
        output, returncode = self._lookup(list(argv))
        call = SimpleNamespace(argv=list(argv), input=None)
        self.calls.append(call)

        def write(data):
            call.input = (call.input or "") + data

        fake_stdin = SimpleNamespace(write=write, close=lambda: None) if stdin is not None else None
        return SimpleNamespace(stdin=fake_stdin, stdout=io.StringIO(output), wait=lambda: returncode)

    @property
    def argvs(self):
        return [c.argv for c in self.calls]

    def find(self, *fragment):
        fragment = list(fragment)
        n = len(fragment)
        return [
            c for c in self.calls if any(c.argv[i : i + n] == fragment for i in range(len(c.argv) - n + 1))
        ]


@pytest.fixture
def procs(monkeypatch):
    recorder = ProcRecorder()
    monkeypatch.setattr(command.subprocess, "Popen", recorder.popen)
    monkeypatch.setattr("time.sleep", lambda seconds: None)
    return recorder


@pytest.fixture
def make_ctx(tmp_path):
    def _make(*, in_chroot=True, dry_run=False, **overrides):
        raw = deep_merge(
            DEFAULTS,
            {
                "target_root": str(tmp_path / "gentoo"),
                "log_dir": str(tmp_path / "logs"),
                "riuos": {"source_dir": str(tmp_path / "src")},
            },
        )
        raw = deep_merge(raw, overrides)
        return InstallCtx(cfg=InstallConfig(raw=raw), in_chroot=in_chroot, dry_run=dry_run)

    return _make


@pytest.fixture(autouse=True)
def _reset_root_logging():
    yield
    logging_utils.reset_logging()


@pytest.fixture
def target_file():
    """Create a file on the (fake) target system; returns its host path."""

    def _write(ctx, target_path, text):
        p = Path(ctx.path(target_path))
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p

    return _write
