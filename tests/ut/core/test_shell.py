"""shell.py run_cmd 单元测试"""

from __future__ import annotations

import sys

import pytest

from prebuilts.core.exceptions import CommandAbortedError, CommandFailedError, ToolchainError
from prebuilts.core.host import HostPlatform, host_platform
from prebuilts.core.platforms import OS
from prebuilts.utils.shell import (
    CommandResult,
    LocalExecutor,
    detect_swift_version,
    get_executor,
    parse_swift_version,
    run_cmd,
    set_executor,
)

posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="需要 /bin/bash")

HOST = HostPlatform(os=OS.LINUX)
WINDOWS_HOST = host_platform("windows")


class _StubExecutor:
    def __init__(self, result: CommandResult | None = None, error: OSError | None = None) -> None:
        self.result = result or CommandResult(returncode=0)
        self.error = error
        self.calls: list[tuple[list[str], object]] = []

    def execute(self, argv, *, cwd, quiet=False, capture=False) -> CommandResult:
        self.calls.append((argv, cwd))
        if self.error is not None:
            raise self.error
        return self.result


class TestRunCmd:
    def test_argv_wrapped_by_host_shell(self, tmp_path) -> None:
        stub = _StubExecutor()
        run_cmd("git status", cwd=tmp_path, host=HOST, executor=stub)
        assert stub.calls == [(["/bin/bash", "-c", "git status"], tmp_path)]

    def test_nonzero_exit_raises_failed(self, tmp_path) -> None:
        stub = _StubExecutor(CommandResult(returncode=3))
        with pytest.raises(CommandFailedError) as exc:
            run_cmd("swift build", cwd=tmp_path, host=HOST, executor=stub)
        assert exc.value.returncode == 3
        assert exc.value.command == "swift build"
        assert "3" in str(exc.value) and "swift build" in str(exc.value)

    def test_signal_raises_aborted(self, tmp_path) -> None:
        stub = _StubExecutor(CommandResult(returncode=-15))
        with pytest.raises(CommandAbortedError) as exc:
            run_cmd("docker run x", cwd=tmp_path, host=HOST, executor=stub)
        assert exc.value.signal == 15
        assert "docker run x" in str(exc.value)

    def test_windows_exception_exit_raises_aborted(self, tmp_path) -> None:
        stub = _StubExecutor(CommandResult(returncode=0xC0000005))
        with pytest.raises(CommandAbortedError, match="0xc0000005") as exc:
            run_cmd("swift build", cwd=tmp_path, host=WINDOWS_HOST, executor=stub)
        assert exc.value.signal is None
        assert exc.value.reason == "0xc0000005"

    def test_windows_ordinary_exit_raises_failed(self, tmp_path) -> None:
        stub = _StubExecutor(CommandResult(returncode=1))
        with pytest.raises(CommandFailedError) as exc:
            run_cmd("swift build", cwd=tmp_path, host=WINDOWS_HOST, executor=stub)
        assert exc.value.returncode == 1

    def test_large_exit_code_on_posix_is_failure(self, tmp_path) -> None:
        stub = _StubExecutor(CommandResult(returncode=0xC0000005))
        with pytest.raises(CommandFailedError):
            run_cmd("swift build", cwd=tmp_path, host=HOST, executor=stub)

    def test_launch_error_raises_aborted(self, tmp_path) -> None:
        stub = _StubExecutor(error=FileNotFoundError("no shell"))
        with pytest.raises(CommandAbortedError, match="no shell") as exc:
            run_cmd("zip -r a lib", cwd=tmp_path, host=HOST, executor=stub)
        assert exc.value.signal is None

    def test_default_executor_replaceable(self, tmp_path) -> None:
        original = get_executor()
        stub = _StubExecutor()
        set_executor(stub)
        try:
            run_cmd("echo hi", cwd=tmp_path, host=HOST)
        finally:
            set_executor(original)
        assert len(stub.calls) == 1


@posix_only
class TestLocalExecutor:
    def test_success_capture(self, tmp_path) -> None:
        r = run_cmd("echo hello", cwd=tmp_path, host=HOST, executor=LocalExecutor(), capture=True)
        assert r.success
        assert "hello" in r.stdout

    def test_runs_in_cwd(self, tmp_path) -> None:
        run_cmd("touch marker", cwd=tmp_path, host=HOST, executor=LocalExecutor(), quiet=True)
        assert (tmp_path / "marker").exists()

    def test_failure(self, tmp_path) -> None:
        with pytest.raises(CommandFailedError) as exc:
            run_cmd("exit 7", cwd=tmp_path, host=HOST, executor=LocalExecutor())
        assert exc.value.returncode == 7

    def test_killed_by_signal(self, tmp_path) -> None:
        with pytest.raises(CommandAbortedError) as exc:
            run_cmd("kill -9 $$", cwd=tmp_path, host=HOST, executor=LocalExecutor())
        assert exc.value.signal == 9


class TestSwiftVersion:
    @pytest.mark.parametrize("output,expected", [
        ("Apple Swift version 6.1 (swiftlang-6.1.0.110.21 clang-1700.0.13.3)\nTarget: arm64-apple-macosx15.0", "6.1"),
        ("Swift version 6.0.3 (swift-6.0.3-RELEASE)\nTarget: x86_64-unknown-linux-gnu", "6.0"),
        ("Swift version 6.2-dev (LLVM abc, Swift def)", "6.2"),
    ])
    def test_parse(self, output: str, expected: str) -> None:
        assert parse_swift_version(output) == expected

    def test_parse_unknown(self) -> None:
        with pytest.raises(ToolchainError):
            parse_swift_version("command not found")

    def test_detect(self, tmp_path) -> None:
        stub = _StubExecutor(CommandResult(returncode=0, stdout="Swift version 5.10 (swift-5.10-RELEASE)"))
        assert detect_swift_version(cwd=tmp_path, host=HOST, executor=stub) == "5.10"
        assert stub.calls[0][0][-1] == "swift --version"
