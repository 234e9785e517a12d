"""
Tests for environment configuration.

Covers:
- Env defaults and strict field validation
- load_env reading process environment variables and .env files
- TimeParser duration strings
"""

import pydantic
import pytest

from switchboard.env import Env, TimeParser, load_env


class TestEnv:
    def test_defaults(self):
        env = Env()

        assert env.SWITCHBOARD_HOST == "127.0.0.1"
        assert env.SWITCHBOARD_PORT == 2000
        assert env.SWITCHBOARD_WORKERS == "1"
        assert env.SWITCHBOARD_LOGS_DIRECTORY is None

    def test_strict_fields_reject_wrong_types(self):
        with pytest.raises(pydantic.ValidationError):
            Env(SWITCHBOARD_PORT="2000")

    def test_log_output_is_limited(self):
        with pytest.raises(pydantic.ValidationError):
            Env(SWITCHBOARD_LOG_OUTPUT="syslog")

    def test_logging_config(self):
        env = Env(SWITCHBOARD_LOG_LEVEL="debug", SWITCHBOARD_LOG_OUTPUT="stderr")

        assert env.get_logging_config() == {
            "log_level": "debug",
            "log_output": "stderr",
            "log_directory": None,
        }


class TestLoadEnv:
    def test_reads_process_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SWITCHBOARD_PORT", "2500")
        monkeypatch.setenv("SWITCHBOARD_WORKERS", "1:4")

        env = load_env(Env, env_file=str(tmp_path / "missing.env"))

        assert env.SWITCHBOARD_PORT == 2500
        assert env.SWITCHBOARD_WORKERS == "1:4"

    def test_env_file_overrides_process_environment(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SWITCHBOARD_PORT=3000\nSWITCHBOARD_HOST=0.0.0.0\nUNRELATED=1\n")

        monkeypatch.setenv("SWITCHBOARD_PORT", "2500")

        env = load_env(Env, env_file=str(env_file))

        assert env.SWITCHBOARD_PORT == 3000
        assert env.SWITCHBOARD_HOST == "0.0.0.0"

    def test_override_takes_precedence(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SWITCHBOARD_PORT", "2500")

        env = load_env(
            Env,
            env_file=str(tmp_path / "missing.env"),
            override=Env(SWITCHBOARD_PORT=4000),
        )

        assert env.SWITCHBOARD_PORT == 4000


class TestTimeParser:
    @pytest.mark.parametrize(
        "duration,seconds",
        [
            ("5s", 5.0),
            ("250ms", 0.25),
            ("2m", 120.0),
            ("1h30m", 5400.0),
            ("1d", 86400.0),
            ("10", 10.0),
            (3, 3.0),
            (0.5, 0.5),
        ],
    )
    def test_parses_durations(self, duration, seconds):
        assert TimeParser(duration).time == seconds
