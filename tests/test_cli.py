"""
Tests for the CLI.

The database and the LLM SDK are replaced by fakes via monkeypatch.
"""

from __future__ import annotations

import json
from contextlib import contextmanager

import pytest
from typer.testing import CliRunner

from aiexplain import __version__
from aiexplain.cli.commands import explain as explain_module
from aiexplain.cli.main import app, default_to_explain
from aiexplain.envfile import ENV_TEMPLATE
from aiexplain.exceptions import DatabaseConnectionError
from aiexplain.explainer import SKIP_MESSAGE, OpenAIExplainer
from fakes import ORDERS_QUERY, FakeOpenAIFactory, openai_chunk, orders_connection

runner = CliRunner()


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text("host=localhost\nport=3306\nusername=root\npassword=\ndatabase=shop\n")
    return path


@pytest.fixture
def fake_db(monkeypatch):
    """Replace open_connection; yields the connection used by the command."""
    conn = orders_connection()

    @contextmanager
    def fake_open_connection(config):
        try:
            yield conn
        finally:
            conn.close()

    monkeypatch.setattr(explain_module, "open_connection", fake_open_connection)
    return conn


def use_fake_llm(monkeypatch, factory: FakeOpenAIFactory) -> None:
    def fake_get_explainer(config):
        return OpenAIExplainer(
            api_key="sk-test", model=config.ai_model, client_factory=factory,
        )

    monkeypatch.setattr(explain_module, "get_explainer", fake_get_explainer)


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestDefaultCommand:
    """A bare query runs explain."""

    @pytest.mark.parametrize(
        "args, expected",
        [
            (["SELECT 1"], ["explain", "SELECT 1"]),
            (["-v", "SELECT 1"], ["-v", "explain", "SELECT 1"]),
            (["explain", "SELECT 1"], ["explain", "SELECT 1"]),
            (["env", "--force"], ["env", "--force"]),
            (["--help"], ["--help"]),
            ([], []),
        ],
    )
    def test_routing(self, args, expected):
        assert default_to_explain(args) == expected

    def test_bare_query_runs_analysis(self, env_file, fake_db, monkeypatch):
        monkeypatch.chdir(env_file.parent)

        result = runner.invoke(app, default_to_explain([ORDERS_QUERY]))

        assert result.exit_code == 0, result.output
        assert SKIP_MESSAGE in result.output


class TestEnvCommand:
    """Tests for aiexplain env."""

    def test_creates_file(self, tmp_path):
        path = tmp_path / ".env"

        result = runner.invoke(app, ["env", "--path", str(path)])

        assert result.exit_code == 0
        assert path.read_text(encoding="utf-8") == ENV_TEMPLATE

    def test_existing_file_untouched(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("host=keep\n")

        result = runner.invoke(app, ["env", "--path", str(path)])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert path.read_text() == "host=keep\n"


class TestExplainCommand:
    """Tests for aiexplain explain."""

    def test_skips_ai_without_key(self, env_file, fake_db):
        """No key: schema and plan are printed, then the skip notice."""
        result = runner.invoke(app, ["explain", "--env-file", str(env_file), ORDERS_QUERY])

        assert result.exit_code == 0, result.output
        assert "AI analysis" in result.output
        assert SKIP_MESSAGE in result.output
        assert "Skipped table customers" in result.output
        assert fake_db.closed

    def test_streams_analysis(self, env_file, fake_db, monkeypatch):
        factory = FakeOpenAIFactory([openai_chunk("Add an index "), openai_chunk("on orders.cid.")])
        use_fake_llm(monkeypatch, factory)

        result = runner.invoke(app, ["explain", "--env-file", str(env_file), ORDERS_QUERY])

        assert result.exit_code == 0, result.output
        assert "Add an index on orders.cid." in result.output
        prompt = factory.requests[0]["messages"][0]["content"]
        assert '"table_name": "orders"' in prompt

    def test_streamed_text_printed_verbatim(self, env_file, fake_db, monkeypatch):
        """Emoji codes and brackets in model output are not interpreted."""
        factory = FakeOpenAIFactory([openai_chunk(":warning: full scan on [orders]")])
        use_fake_llm(monkeypatch, factory)

        result = runner.invoke(app, ["explain", "--env-file", str(env_file), ORDERS_QUERY])

        assert result.exit_code == 0, result.output
        assert ":warning: full scan on [orders]" in result.output

    def test_no_stream(self, env_file, fake_db, monkeypatch):
        factory = FakeOpenAIFactory([openai_chunk("Looks "), openai_chunk("fine")])
        use_fake_llm(monkeypatch, factory)

        result = runner.invoke(
            app, ["explain", "--no-stream", "--env-file", str(env_file), ORDERS_QUERY],
        )

        assert result.exit_code == 0, result.output
        assert "Looks fine" in result.output

    def test_model_override(self, env_file, fake_db, monkeypatch):
        factory = FakeOpenAIFactory([openai_chunk("ok")])
        use_fake_llm(monkeypatch, factory)

        runner.invoke(
            app, ["explain", "--model", "gpt-4o", "--env-file", str(env_file), ORDERS_QUERY],
        )

        assert factory.requests[0]["model"] == "gpt-4o"

    def test_json_output(self, env_file, fake_db, monkeypatch):
        """--json prints the request and makes no AI call."""
        factory = FakeOpenAIFactory([openai_chunk("never")])
        use_fake_llm(monkeypatch, factory)

        result = runner.invoke(
            app, ["explain", "--json", "--env-file", str(env_file), f"EXPLAIN {ORDERS_QUERY}"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["sql_query"] == ORDERS_QUERY
        assert [t["table_name"] for t in data["table_infos"]] == ["orders"]
        assert factory.requests == []

    def test_missing_env_file(self, tmp_path, fake_db):
        result = runner.invoke(
            app, ["explain", "--env-file", str(tmp_path / "nope.env"), ORDERS_QUERY],
        )

        assert result.exit_code == 1
        assert "Error" in result.output
        assert fake_db.executed == []

    def test_no_tables(self, env_file, fake_db):
        result = runner.invoke(app, ["explain", "--env-file", str(env_file), "SELECT 1"])

        assert result.exit_code == 1
        assert "No table names detected" in result.output
        assert fake_db.closed

    def test_plan_failure(self, env_file, fake_db):
        result = runner.invoke(
            app, ["explain", "--env-file", str(env_file), "SELECT * FROM orders WHERE"],
        )

        assert result.exit_code == 1
        assert "EXPLAIN failed" in result.output

    def test_connection_failure(self, env_file, monkeypatch):
        @contextmanager
        def refused(config):
            raise DatabaseConnectionError("Failed to connect to MySQL at localhost:3306")
            yield

        monkeypatch.setattr(explain_module, "open_connection", refused)

        result = runner.invoke(app, ["explain", "--env-file", str(env_file), ORDERS_QUERY])

        assert result.exit_code == 1
        assert "Failed to connect" in result.output

    def test_completion_failure(self, env_file, fake_db, monkeypatch):
        import openai

        factory = FakeOpenAIFactory(
            [openai_chunk("partial")], error=openai.OpenAIError("stream reset"),
        )
        use_fake_llm(monkeypatch, factory)

        result = runner.invoke(app, ["explain", "--env-file", str(env_file), ORDERS_QUERY])

        assert result.exit_code == 1
        assert "partial" in result.output
        assert "stream reset" in result.output

    def test_missing_sql_shows_help(self):
        result = runner.invoke(app, ["explain"])

        assert result.exit_code == 0
        assert "Usage" in result.output
