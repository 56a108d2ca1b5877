"""
Integration tests for the command-line interface.
"""

import json

import pytest

from campaign_insights.cli.report_cli import main
from campaign_insights.observability.logger import configure_package_logging

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def restore_logging():
    """Rebind package loggers to the session stderr after --log-* options"""
    yield
    configure_package_logging()


def run(capsys, *argv):
    """Run the CLI and return (exit_code, parsed_stdout_or_None)"""
    code = main(list(argv))
    out = capsys.readouterr().out
    return code, (json.loads(out) if code == 0 and out.strip() else None)


class TestProcessCommand:
    """Tests for the process subcommand"""

    def test_outputs_records(self, capsys, sample_export_path):
        """Test the JSON document carries metadata, metrics and summary"""
        code, output = run(capsys, "process", "--input", str(sample_export_path))

        assert code == 0
        assert output["filename"] == "CCI - 2025 Q1 13_05_2025 - 20_05_2025.csv"
        assert output["metadata"]["client"] == "CCI"
        assert output["metadata"]["date_range"] == "2025-05-13 / 2025-05-20"
        assert output["row_count"] == 10
        assert output["metrics"]["metrics"]["unique_visitors"] == 5
        assert output["metrics"]["total_audience"] is None
        assert output["summary"]["Unique Completion Rate"] == "%40"
        assert output["interactions"][0]["event"] == "Back to Home"
        assert output["funnel"] is None

    def test_total_audience_and_funnel(self, capsys, sample_export_path):
        code, output = run(
            capsys,
            "process",
            "--input", str(sample_export_path),
            "--total-audience", "50",
            "--funnel", "total_audience, unique_visitors, unique_plays, unique_completions",
        )

        assert code == 0
        assert output["metrics"]["total_audience"] == 50
        assert list(output["summary"])[0] == "Total Audience"
        stages = output["funnel"]["stages"]
        assert [s["metric"] for s in stages] == [
            "total_audience", "unique_visitors", "unique_plays", "unique_completions",
        ]
        assert stages[0]["pct_of_previous"] is None
        assert output["funnel"]["audience_reach"] == 100.0

    def test_suggested_funnel(self, capsys, sample_export_path):
        code, output = run(capsys, "process", "--input", str(sample_export_path), "--suggest-funnel")

        assert code == 0
        assert len(output["funnel"]["stages"]) == 4

    def test_suggested_funnel_for_sparse_export(self, capsys, tmp_path):
        """Test an export too sparse for a funnel is still reported"""
        export = tmp_path / "export.csv"
        export.write_text("user_id\nU1\nU2\n", encoding="utf-8")

        code, output = run(capsys, "process", "--input", str(export), "--suggest-funnel")

        assert code == 0
        assert output["metrics"]["metrics"]["unique_visitors"] == 2
        assert output["funnel"] is None

    def test_custom_config(self, capsys, tmp_path, sample_export_path):
        """Test --config replaces the test user list"""
        config_path = tmp_path / "engine.yaml"
        config_path.write_text("engine:\n  test_user_ids: [U100]\n", encoding="utf-8")

        code, output = run(
            capsys, "--config", str(config_path), "process", "--input", str(sample_export_path)
        )

        assert code == 0
        assert output["metrics"]["excluded_test_users"] == ["U100"]

    def test_log_options(self, capsys, sample_export_path):
        code, output = run(
            capsys,
            "--log-level", "DEBUG", "--log-format", "text",
            "process", "--input", str(sample_export_path),
        )

        assert code == 0
        assert output["metadata"]["quarter"] == "2025 Q1"

    @pytest.mark.parametrize("extra", [
        ["--funnel", "unique_visitors,unique_plays"],
        ["--funnel", "unique_visitors,unique_plays,unknown_metric"],
        ["--funnel", "unique_visitors,unique_plays,unique_visitors"],
        ["--total-audience", "lots"],
        ["--total-audience", "-1"],
    ])
    def test_invalid_options_exit_with_error(self, capsys, sample_export_path, extra):
        code, _ = run(capsys, "process", "--input", str(sample_export_path), *extra)

        assert code == 1

    def test_missing_input(self, capsys, tmp_path):
        code, _ = run(capsys, "process", "--input", str(tmp_path / "absent.csv"))

        assert code == 1

    def test_malformed_input(self, capsys, fixtures_dir):
        code, _ = run(capsys, "process", "--input", str(fixtures_dir / "unterminated_quote.csv"))

        assert code == 1

    def test_oversized_counts_still_report(self, capsys, tmp_path):
        """Test a count beyond the int64 range does not abort the run"""
        export = tmp_path / "export.csv"
        export.write_text("user_id,plays\nU1,12345678901234567890\n", encoding="utf-8")

        code, output = run(capsys, "process", "--input", str(export))

        assert code == 0
        assert output["metrics"]["metrics"]["unique_plays"] == 1

    def test_missing_config(self, capsys, tmp_path, sample_export_path):
        code, _ = run(
            capsys,
            "--config", str(tmp_path / "absent.yaml"),
            "process", "--input", str(sample_export_path),
        )

        assert code == 1


class TestShowConfigCommand:
    """Tests for the show-config subcommand"""

    def test_defaults(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        code, output = run(capsys, "show-config")

        assert code == 0
        assert output == {
            "test_user_ids": ["OMMATEST", "PH123", "X001"],
            "interaction_column_prefix": "event_count_",
            "missing_id_prefix": "MissingID-",
            "funnel_size_bounds": {"min": 3, "max": 6, "default": 4},
        }

    def test_invalid_config(self, capsys, tmp_path):
        config_path = tmp_path / "engine.yaml"
        config_path.write_text("other: {}\n", encoding="utf-8")

        code, _ = run(capsys, "--config", str(config_path), "show-config")

        assert code == 1


class TestMain:
    """Tests for argument handling"""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "Available commands" in capsys.readouterr().out

    def test_input_is_required(self):
        with pytest.raises(SystemExit):
            main(["process"])
