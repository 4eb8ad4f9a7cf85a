"""Tests for the entrypointer phase ordering."""

from entrypoint.src.entrypointer import Entrypointer

class FakeWaiter:
    def __init__(self, calls):
        self.calls = calls

    def wait(self, file):
        self.calls.append(("wait", file))

class FakeRunner:
    def __init__(self, calls):
        self.calls = calls

    def run(self, *args):
        self.calls.append(("run", list(args)))

class FakePostWriter:
    def __init__(self, calls):
        self.calls = calls

    def write(self, file):
        self.calls.append(("write", file))

def make_entrypointer(calls, **kwargs):
    return Entrypointer(
        waiter=FakeWaiter(calls),
        runner=FakeRunner(calls),
        post_writer=FakePostWriter(calls),
        **kwargs,
    )

def test_phases_run_in_order():
    calls = []
    make_entrypointer(
        calls,
        wait_file="/tools/0",
        post_file="/tools/1",
        args=["make", "test"],
    ).go()

    assert calls == [
        ("wait", "/tools/0"),
        ("run", ["make", "test"]),
        ("write", "/tools/1"),
    ]

def test_no_wait_or_post_when_unset():
    calls = []
    make_entrypointer(calls, args=["echo", "hi"]).go()

    assert calls == [("run", ["echo", "hi"])]

def test_entrypoint_is_prepended():
    calls = []
    make_entrypointer(calls, entrypoint="/ko-app/build", args=["--flag", "x"]).go()

    assert calls == [("run", ["/ko-app/build", "--flag", "x"])]

def test_entrypoint_does_not_modify_args():
    calls = []
    ep = make_entrypointer(calls, entrypoint="sh", args=["-c", "true"])
    ep.go()

    assert ep.args == ["-c", "true"]

def test_runner_called_without_command():
    calls = []
    make_entrypointer(calls, post_file="/tools/1").go()

    assert calls == [("run", []), ("write", "/tools/1")]
