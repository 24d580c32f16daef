import signal

import pytest

from webserv.main import main


@pytest.fixture(autouse=True)
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_too_many_arguments(capsys):
    assert main(["a.conf", "b.conf"]) == 1
    captured = capsys.readouterr()
    assert "Error: Too many arguments" in captured.err
    assert "Usage:" in captured.out


@pytest.mark.parametrize("flag", ["-h", "--help"])
def test_help(flag, capsys):
    assert main([flag]) == 0
    out = capsys.readouterr().out
    assert "[configuration_file]" in out
    assert "config/default.conf" in out


def test_missing_configuration_fails(in_tmp, capsys):
    assert main([str(in_tmp / "missing.conf")]) == 1
    log = (in_tmp / "webserv.log").read_text()
    assert "[ERROR] Failed to parse configuration file" in log
    assert "=== Webserv HTTP Server ===" in capsys.readouterr().out


def test_default_configuration_path_is_used(in_tmp):
    assert main([]) == 1
    log = (in_tmp / "webserv.log").read_text()
    assert "Configuration file: config/default.conf" in log


def test_unusable_listen_address_is_fatal(in_tmp):
    conf = in_tmp / "bad.conf"
    conf.write_text("server {\n    listen 256.1.1.1:8080;\n}\n")
    before = signal.getsignal(signal.SIGTERM)
    assert main([str(conf)]) == 1
    assert signal.getsignal(signal.SIGTERM) == before
    log = (in_tmp / "webserv.log").read_text()
    assert "[WARNING] Failed to create socket for 256.1.1.1" in log
    assert "[FATAL] Fatal error: No listening sockets available" in log