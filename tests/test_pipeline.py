"""End-to-end tests for the top-up pipeline."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from structlog.testing import capture_logs

from topup.config import IdPolicy, PathsConfig, PipelineConfig
from topup.pipeline import TopUpPipeline, run_pipeline

ACME_REPORT = (
    "    Company Id: 1\n"
    "    Company Name: Acme\n"
    "    Users Emailed:\n"
    "        Smith, A, a@x\n"
    "          Previous Token Balance: 5\n"
    "          New Token Balance: 5\n"
    "    Users Not Emailed:\n"
    "        Jones, B, b@x\n"
    "          Previous Token Balance: 20\n"
    "          New Token Balance: 30\n"
    "        Total Top Ups for Acme: 10\n"
)


@pytest.fixture
def acme_files(
    write_json: Callable[[str, Any], Path],
    acme_company: dict[str, Any],
    acme_users: list[dict[str, Any]],
) -> None:
    """Write the Acme scenario as companies.json and users.json."""
    write_json("companies.json", [acme_company])
    write_json("users.json", acme_users)


class TestTopUpPipeline:
    """Tests for TopUpPipeline.run."""

    @pytest.mark.usefixtures("acme_files")
    def test_acme_scenario(self, pipeline_config: PipelineConfig) -> None:
        """Test the reference scenario end to end."""
        result = TopUpPipeline(pipeline_config).run()

        assert result.written
        assert not result.skipped
        assert result.n_companies == 1
        assert result.n_users == 2
        assert result.n_reported_users == 2
        assert result.output_path == pipeline_config.output_path
        assert pipeline_config.output_path.read_text(encoding="utf-8") == ACME_REPORT

    @pytest.mark.usefixtures("acme_files")
    def test_idempotent(self, pipeline_config: PipelineConfig) -> None:
        """Test re-running on the same inputs gives byte-identical output."""
        TopUpPipeline(pipeline_config).run()
        first = pipeline_config.output_path.read_bytes()
        TopUpPipeline(pipeline_config).run()
        assert pipeline_config.output_path.read_bytes() == first

    def test_companies_sorted_numerically(
        self,
        pipeline_config: PipelineConfig,
        write_json: Callable[[str, Any], Path],
        make_user: Callable[..., dict[str, Any]],
    ) -> None:
        """Test company blocks appear in ascending numeric id order."""
        write_json(
            "companies.json",
            [
                {"id": 10, "name": "Ten", "top_up": 1, "email_status": True},
                {"id": 2, "name": "Two", "top_up": 1, "email_status": True},
            ],
        )
        write_json("users.json", [make_user(company_id=2)])

        TopUpPipeline(pipeline_config).run()

        text = pipeline_config.output_path.read_text(encoding="utf-8")
        assert text.index("Company Id: 2") < text.index("Company Id: 10")

    @pytest.mark.parametrize("missing", ["companies.json", "users.json"])
    def test_missing_input_short_circuits(
        self,
        pipeline_config: PipelineConfig,
        write_json: Callable[[str, Any], Path],
        acme_company: dict[str, Any],
        acme_users: list[dict[str, Any]],
        missing: str,
    ) -> None:
        """Test a missing input logs one diagnostic and writes nothing."""
        files = {"companies.json": [acme_company], "users.json": acme_users}
        del files[missing]
        for name, data in files.items():
            write_json(name, data)

        with capture_logs() as logs:
            result = TopUpPipeline(pipeline_config).run()

        assert result.skipped
        assert not result.written
        assert not pipeline_config.output_path.exists()
        errors = [e for e in logs if e["log_level"] == "error"]
        assert [e["event"] for e in errors] == ["Input file not found"]

    def test_malformed_input_short_circuits(
        self,
        pipeline_config: PipelineConfig,
        tmp_path: Path,
        write_json: Callable[[str, Any], Path],
        acme_users: list[dict[str, Any]],
    ) -> None:
        """Test malformed JSON is reported and no report is written."""
        (tmp_path / "companies.json").write_text("{oops", encoding="utf-8")
        write_json("users.json", acme_users)

        with capture_logs() as logs:
            result = TopUpPipeline(pipeline_config).run()

        assert result.skipped
        assert not pipeline_config.output_path.exists()
        assert [e["event"] for e in logs if e["log_level"] == "error"] == [
            "Invalid JSON in input file"
        ]

    def test_all_users_invalid_short_circuits_silently(
        self,
        pipeline_config: PipelineConfig,
        write_json: Callable[[str, Any], Path],
        acme_company: dict[str, Any],
    ) -> None:
        """Test an input with no valid records writes nothing and logs no error."""
        write_json("companies.json", [acme_company])
        write_json("users.json", [{"id": 1, "company_id": 1}])

        with capture_logs() as logs:
            result = TopUpPipeline(pipeline_config).run()

        assert result.skipped
        assert result.n_users == 0
        assert not pipeline_config.output_path.exists()
        assert not [e for e in logs if e["log_level"] in ("warning", "error")]

    @pytest.mark.usefixtures("acme_files")
    def test_stale_output_is_kept_when_skipped(
        self, pipeline_config: PipelineConfig, write_json: Callable[[str, Any], Path]
    ) -> None:
        """Test a skipped run leaves a previous report untouched."""
        TopUpPipeline(pipeline_config).run()
        write_json("users.json", [])

        result = TopUpPipeline(pipeline_config).run()

        assert result.skipped
        assert pipeline_config.output_path.read_text(encoding="utf-8") == ACME_REPORT

    def test_invalid_and_orphan_records_silent(
        self,
        pipeline_config: PipelineConfig,
        write_json: Callable[[str, Any], Path],
        acme_company: dict[str, Any],
        acme_users: list[dict[str, Any]],
        make_user: Callable[..., dict[str, Any]],
    ) -> None:
        """Test schema-invalid and orphan records vanish without diagnostics."""
        orphan = make_user(company_id=42, last_name="Orphan")
        invalid = {k: v for k, v in make_user().items() if k != "email"}
        write_json(
            "companies.json", [acme_company, {"id": 5, "name": "No flags"}]
        )
        write_json("users.json", [*acme_users, orphan, invalid])

        with capture_logs() as logs:
            result = TopUpPipeline(pipeline_config).run()

        assert pipeline_config.output_path.read_text(encoding="utf-8") == ACME_REPORT
        assert result.n_companies == 1
        assert result.n_users == 3
        assert result.n_reported_users == 2
        assert not [e for e in logs if e["log_level"] in ("warning", "error")]

    @pytest.mark.usefixtures("acme_files")
    def test_write_failure_is_reported(self, tmp_path: Path) -> None:
        """Test an unwritable output path is logged, not raised."""
        config = PipelineConfig(
            paths=PathsConfig(data_root=tmp_path, output=Path("no/such/dir/out.txt"))
        )

        with capture_logs() as logs:
            result = TopUpPipeline(config).run()

        assert not result.written
        assert not result.skipped
        errors = [e for e in logs if e["log_level"] == "error"]
        assert [e["event"] for e in errors] == ["Unable to write report"]
        assert errors[0]["path"] == str(config.output_path)

    def test_unencodable_user_name_is_reported(
        self,
        pipeline_config: PipelineConfig,
        write_json: Callable[[str, Any], Path],
        acme_company: dict[str, Any],
        acme_users: list[dict[str, Any]],
        make_user: Callable[..., dict[str, Any]],
    ) -> None:
        """Test a lone surrogate in a name is logged and no file is written."""
        write_json("companies.json", [acme_company])
        write_json("users.json", [*acme_users, make_user(first_name="\ud800")])

        with capture_logs() as logs:
            result = TopUpPipeline(pipeline_config).run()

        assert not result.written
        assert not pipeline_config.output_path.exists()
        assert [e["event"] for e in logs if e["log_level"] == "error"] == [
            "Unable to write report"
        ]

    def test_render_failure_is_reported(
        self,
        pipeline_config: PipelineConfig,
        write_json: Callable[[str, Any], Path],
        make_user: Callable[..., dict[str, Any]],
    ) -> None:
        """Test a non-numeric balance is logged and nothing is written."""
        write_json(
            "companies.json",
            [{"id": 1, "name": "A", "top_up": 5, "email_status": False}],
        )
        write_json("users.json", [make_user(tokens="many")])

        with capture_logs() as logs:
            result = TopUpPipeline(pipeline_config).run()

        assert not result.written
        assert not pipeline_config.output_path.exists()
        assert [e["event"] for e in logs if e["log_level"] == "error"] == [
            "Unable to render report"
        ]

    def test_strict_ids_reject_every_company(
        self,
        tmp_path: Path,
        write_json: Callable[[str, Any], Path],
        make_user: Callable[..., dict[str, Any]],
    ) -> None:
        """Test strict policy with only bad ids writes nothing."""
        write_json(
            "companies.json",
            [{"id": "1a", "name": "A", "top_up": 5, "email_status": True}],
        )
        write_json("users.json", [make_user(company_id="1a")])
        config = PipelineConfig(
            paths=PathsConfig(data_root=tmp_path), id_policy=IdPolicy.STRICT
        )

        result = TopUpPipeline(config).run()

        assert result.skipped
        assert not config.output_path.exists()


class TestRunPipeline:
    """Tests for the run_pipeline convenience wrapper."""

    def test_path_overrides(
        self,
        tmp_path: Path,
        write_json: Callable[[str, Any], Path],
        acme_company: dict[str, Any],
        acme_users: list[dict[str, Any]],
    ) -> None:
        """Test keyword path overrides replace the defaults."""
        write_json("c.json", [acme_company])
        write_json("u.json", acme_users)

        result = run_pipeline(
            data_root=tmp_path, companies="c.json", users="u.json", output="r.txt"
        )

        assert result.output_path == tmp_path / "r.txt"
        assert (tmp_path / "r.txt").read_text(encoding="utf-8") == ACME_REPORT

    def test_unknown_override(self) -> None:
        """Test misspelled overrides raise ValueError."""
        with pytest.raises(ValueError, match="Unknown path override"):
            run_pipeline(ouput="x.txt")

    @pytest.mark.usefixtures("acme_files")
    def test_default_paths_in_working_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the default config reads and writes in the working directory."""
        monkeypatch.chdir(tmp_path)

        result = run_pipeline()

        assert result.written
        assert (tmp_path / "output.txt").read_text(encoding="utf-8") == ACME_REPORT
