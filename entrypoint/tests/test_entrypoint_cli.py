"""Tests for the entrypoint command line."""

import pytest
from click.testing import CliRunner

from entrypoint.src.config import get_settings
from entrypoint.src.errors import INTERNAL_FAULT_EXIT_CODE
from entrypoint.src.main import main

def test_true_exits_zero():
    result = CliRunner().invoke(main, ["--", "true"])
    assert result.exit_code == 0

def test_post_file_written_after_success(tmp_path):
    post = tmp_path / "1"
    result = CliRunner().invoke(main, ["--post-file", str(post), "--", "true"])

    assert result.exit_code == 0
    assert post.exists()

def test_failure_exit_code_and_no_post_file(tmp_path):
    post = tmp_path / "1"
    result = CliRunner().invoke(main, ["--post-file", str(post), "--", "sh", "-c", "exit 2"])

    assert result.exit_code == 2
    assert not post.exists()

def test_waits_for_existing_file_then_runs(tmp_path):
    wait = tmp_path / "0"
    wait.touch()
    post = tmp_path / "1"

    result = CliRunner().invoke(
        main, ["--wait-file", str(wait), "--post-file", str(post), "--", "true"]
    )

    assert result.exit_code == 0
    assert post.exists()

def test_entrypoint_prepended_to_args():
    result = CliRunner().invoke(main, ["--entrypoint", "sh", "--", "-c", "exit 4"])
    assert result.exit_code == 4

def test_options_read_from_environment(tmp_path):
    post = tmp_path / "1"
    result = CliRunner().invoke(main, ["true"], env={"PODLINE_POST_FILE": str(post)})

    assert result.exit_code == 0
    assert post.exists()

@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

def test_dotenv_in_working_dir_is_ignored(tmp_path, monkeypatch, fresh_settings):
    (tmp_path / ".env").write_text("ENTRYPOINT_TOKEN=abc\nENTRYPOINT_POLL_INTERVAL=soon\n")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(main, ["--", "true"])

    assert result.exit_code == 0

def test_bad_setting_is_internal_fault(fresh_settings):
    result = CliRunner().invoke(main, ["--", "true"], env={"ENTRYPOINT_POLL_INTERVAL": "soon"})
    assert result.exit_code == INTERNAL_FAULT_EXIT_CODE

def test_bad_log_level_is_internal_fault(fresh_settings):
    result = CliRunner().invoke(main, ["--", "true"], env={"ENTRYPOINT_LOG_LEVEL": "chatty"})
    assert result.exit_code == INTERNAL_FAULT_EXIT_CODE
