from datetime import datetime, timedelta

from taskhub.utils import logger as logger_module
from taskhub.utils.logger import RequestTimer, cleanup_old_logs


def test_cleanup_removes_only_expired_dated_dirs(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "LOG_DIR", tmp_path)
    old = tmp_path / (datetime.now() - timedelta(days=30)).strftime("%Y-%m-%d")
    recent = tmp_path / datetime.now().strftime("%Y-%m-%d")
    unrelated = tmp_path / "archive"
    for directory in (old, recent, unrelated):
        directory.mkdir()
        (directory / "taskhub.log").write_text("line\n")

    assert cleanup_old_logs(keep_days=7) == 1
    assert not old.exists()
    assert recent.exists()
    assert unrelated.exists()


def test_cleanup_without_log_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "LOG_DIR", tmp_path / "missing")
    assert cleanup_old_logs() == 0


def test_request_timer_measures_elapsed_time():
    with RequestTimer() as timer:
        sum(range(1000))
    assert timer.elapsed_ms >= 0
