"""Tests for the rosterpipe CLI."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from rosterpipe.cli import (
    Calc,
    Demo,
    Install,
    ListPipelines,
    Run,
    calculate,
    install_config,
    list_pipelines,
    main,
    run_demos,
    run_pipeline,
)
from rosterpipe.config import clear_config_instance
from rosterpipe.pipeline.registry import get_registry


@pytest.fixture(autouse=True)
def cleanup():
    """Clean up the global config between tests."""
    yield
    clear_config_instance()


def write_config(config_dir: Path, pipelines: list[dict]) -> None:
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "rosterpipe.yaml").write_text(yaml.safe_dump({"rosterpipe": {"pipelines": pipelines}}))


class TestInstallConfig:
    """Test installing the packaged configuration template."""

    def test_install_creates_config(self, tmp_path: Path, capsys) -> None:
        config_dir = tmp_path / "conf"

        install_config(config_dir)

        installed = config_dir / "rosterpipe.yaml"
        assert installed.exists()
        assert "pipelines" in yaml.safe_load(installed.read_text())["rosterpipe"]
        assert "Installed rosterpipe.yaml" in capsys.readouterr().out

    def test_install_refuses_overwrite(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "rosterpipe.yaml").write_text("existing")

        with pytest.raises(SystemExit) as exc_info:
            install_config(tmp_path)

        assert exc_info.value.code == 1
        assert "Use --force to overwrite" in capsys.readouterr().err
        assert (tmp_path / "rosterpipe.yaml").read_text() == "existing"

    def test_install_force(self, tmp_path: Path) -> None:
        (tmp_path / "rosterpipe.yaml").write_text("existing")

        install_config(tmp_path, force=True)

        assert (tmp_path / "rosterpipe.yaml").read_text() != "existing"


class TestRunDemos:
    """Test running the numbered approaches."""

    def test_single_approach(self, capsys) -> None:
        with patch("rosterpipe.criteria.run_demo") as mock_run:
            run_demos(3)

        mock_run.assert_called_once_with(3)
        assert "Approach 3" in capsys.readouterr().out

    def test_all_approaches(self) -> None:
        with patch("rosterpipe.criteria.run_demo") as mock_run:
            run_demos(None)

        assert [c.args[0] for c in mock_run.call_args_list] == list(range(1, 10))

    def test_unknown_approach(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run_demos(12)

        assert exc_info.value.code == 1
        assert "no approach 12" in capsys.readouterr().err


class TestListPipelines:
    """Test the configured pipeline table."""

    def test_no_config(self, tmp_path: Path, capsys) -> None:
        list_pipelines(tmp_path)

        assert "No pipelines configured" in capsys.readouterr().out

    def test_table(self, tmp_path: Path, capsys) -> None:
        write_config(tmp_path, [{"name": "draft", "selector": "selective_service", "transform": "email"}])

        list_pipelines(tmp_path)

        out = capsys.readouterr().out
        assert "draft" in out
        assert "selective_service" in out


class TestRunPipeline:
    """Test running a configured pipeline over the roster."""

    def test_runs_configured_pipeline(self, tmp_path: Path, capsys) -> None:
        write_config(
            tmp_path,
            [{"name": "everyone", "selector": "rosterpipe.criteria.older_than", "params": {"age": 0}, "transform": "name", "sink": "print_value"}],
        )

        run_pipeline(tmp_path, "everyone")

        out = capsys.readouterr().out
        assert out.split()[:4] == ["Fred", "Jane", "George", "Bob"]
        assert "4 of 4 members matched" in out

    def test_unknown_pipeline(self, tmp_path: Path, capsys) -> None:
        write_config(tmp_path, [{"name": "everyone", "selector": "selective_service"}])

        with pytest.raises(SystemExit) as exc_info:
            run_pipeline(tmp_path, "nobody")

        assert exc_info.value.code == 1
        assert "unknown pipeline 'nobody'" in capsys.readouterr().err

    def test_failing_pipeline(self, tmp_path: Path, capsys) -> None:
        write_config(tmp_path, [{"name": "broken", "selector": "selective_service"}])

        with patch("rosterpipe.pipeline.registry.process_elements", side_effect=RuntimeError("printer on fire")):
            with pytest.raises(SystemExit) as exc_info:
                run_pipeline(tmp_path, "broken")

        assert exc_info.value.code == 1
        assert "Pipeline 'broken' failed: RuntimeError: printer on fire" in capsys.readouterr().err

    def test_failure_notes_reported(self, tmp_path: Path, capsys) -> None:
        get_registry().register("sink", "test_cli_exploding", exploding_sink)
        write_config(
            tmp_path,
            [{"name": "broken", "selector": "rosterpipe.criteria.older_than", "params": {"age": 0}, "sink": "test_cli_exploding"}],
        )

        with pytest.raises(SystemExit):
            run_pipeline(tmp_path, "broken")

        err = capsys.readouterr().err
        assert "printer on fire" in err
        assert "sink failed on source element 0" in err


def exploding_sink(value) -> None:
    raise RuntimeError("printer on fire")


class TestCalculate:
    """Test the two-operand calculator command."""

    @pytest.mark.parametrize(
        ("op", "expected"),
        [("add", "40 + 2 = 42"), ("subtract", "40 - 2 = 38"), ("multiply", "40 * 2 = 80")],
    )
    def test_calculate(self, op: str, expected: str, capsys) -> None:
        calculate(40, 2, op)
        assert capsys.readouterr().out.strip() == expected


class TestMain:
    """Test command dispatch."""

    def test_dispatch_calc(self, tmp_path: Path, capsys) -> None:
        main(Calc(a=20, b=12, op="subtract"), config_dir=tmp_path)
        assert "20 - 12 = 8" in capsys.readouterr().out

    def test_dispatch_demo(self, tmp_path: Path) -> None:
        with patch("rosterpipe.cli.run_demos") as mock_demos:
            main(Demo(approach=9), config_dir=tmp_path)
        mock_demos.assert_called_once_with(9)

    def test_dispatch_list(self, tmp_path: Path) -> None:
        with patch("rosterpipe.cli.list_pipelines") as mock_list:
            main(ListPipelines(), config_dir=tmp_path)
        mock_list.assert_called_once_with(tmp_path)

    def test_dispatch_run(self, tmp_path: Path) -> None:
        with patch("rosterpipe.cli.run_pipeline") as mock_run:
            main(Run(name="draft"), config_dir=tmp_path)
        mock_run.assert_called_once_with(tmp_path, "draft")

    def test_dispatch_install(self, tmp_path: Path) -> None:
        with patch("rosterpipe.cli.install_config") as mock_install:
            main(Install(force=True), config_dir=tmp_path)
        mock_install.assert_called_once_with(tmp_path, force=True)

    def test_install_force_over_malformed_config(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "rosterpipe.yaml").write_text("rosterpipe: [unclosed\n")

        main(Install(force=True), config_dir=tmp_path)

        installed = yaml.safe_load((tmp_path / "rosterpipe.yaml").read_text())
        assert "pipelines" in installed["rosterpipe"]
        assert "Installed rosterpipe.yaml" in capsys.readouterr().out

    def test_calc_ignores_malformed_config(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "rosterpipe.yaml").write_text("rosterpipe: [unclosed\n")

        main(Calc(a=40, b=2), config_dir=tmp_path)

        assert "40 + 2 = 42" in capsys.readouterr().out

    def test_list_with_malformed_config(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "rosterpipe.yaml").write_text("rosterpipe: [unclosed\n")

        main(ListPipelines(), config_dir=tmp_path)

        assert "No pipelines configured" in capsys.readouterr().out
