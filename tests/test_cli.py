"""Tests for the lwes-logger command line."""

import pytest

from lwes_logger.cli import main, parse_data
from lwes_logger.codec import decode_event


class TestParseData:
    def test_pairs(self):
        assert parse_data(["build=1234", "env=prod=blue"]) == {'build': "1234", 'env': "prod=blue"}

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_data(["novalue"])


class TestEmit:
    def test_emit_with_config(self, tmp_path, receiver):
        sock, port = receiver
        config = tmp_path / "logger.yaml"
        config.write_text(
            "address: 127.0.0.1\n"
            f"port: {port}\n"
            "heartbeat: 0\n"
            "namespace: cli_test\n"
        )

        code = main([
            "emit", "--config", str(config),
            "--severity", "warn", "--data", "build=1234", "--no-full",
            "deploy finished",
        ])

        assert code == 0
        channel, fields = decode_event(sock.recvfrom(65536)[0])
        assert channel == "CliTest::Warn"
        assert fields['message'] == "deploy finished"
        assert fields['build'] == "1234"

    def test_missing_config(self, tmp_path, capsys):
        code = main(["emit", "--config", str(tmp_path / "nope.yaml"), "hi"])
        assert code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_missing_address(self, capsys):
        assert main(["emit", "hi"]) == 1
        assert "address" in capsys.readouterr().err

    @pytest.mark.parametrize("extra", [
        ["--data", "build=1234"],
        ["--progname", "deployer"],
    ])
    def test_append_rejects_call_fields(self, extra, capsys):
        code = main([
            "emit", "--address", "127.0.0.1",
            "--severity", "any", *extra, "raw line",
        ])
        assert code == 1
        assert "--severity any" in capsys.readouterr().err
