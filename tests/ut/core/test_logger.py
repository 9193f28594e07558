"""日志配置测试"""

from __future__ import annotations

import json
import logging
import sys

import pytest

from provisioner.utils.logger import JSONFormatter, StageFilter, reset_logging, setup_logging


def _record(msg: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("provisioner.test", logging.INFO, __file__, 1, msg, (), None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


@pytest.fixture(autouse=True)
def _restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    reset_logging()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


class TestJSONFormatter:
    def test_stage_field(self) -> None:
        data = json.loads(JSONFormatter().format(_record("下载失败", stage="archive")))
        assert data["stage"] == "archive"
        assert data["message"] == "下载失败"
        assert data["level"] == "INFO"

    def test_no_stage_field_outside_stages(self) -> None:
        data = json.loads(JSONFormatter().format(_record()))
        assert "stage" not in data
        assert "exception" not in data

    def test_keeps_non_ascii(self) -> None:
        assert "已跳过" in JSONFormatter().format(_record("已跳过"))

    def test_exception(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestStageFilter:
    def test_prefix(self) -> None:
        record = _record(stage="packages")
        assert StageFilter().filter(record)
        assert record.stage_prefix == "[packages] "

    def test_missing_stage(self) -> None:
        record = _record()
        StageFilter().filter(record)
        assert record.stage == ""
        assert record.stage_prefix == ""


class TestSetupLogging:
    def test_repeated_setup_single_handler(self) -> None:
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_json_output_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("INFO", json_output=True)
        logging.getLogger("provisioner.test").info("准备完成", extra={"stage": "submodules"})
        line = capsys.readouterr().err.strip().splitlines()[-1]
        data = json.loads(line)
        assert data["stage"] == "submodules"
        assert data["message"] == "准备完成"

    def test_text_output_prefix(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("INFO")
        logging.getLogger("provisioner.test").warning("无法下载", extra={"stage": "archive"})
        captured = capsys.readouterr()
        assert "[archive] 无法下载" in captured.err
        assert captured.out == ""
