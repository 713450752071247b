"""Tests for the command-line entry point."""
from unittest.mock import MagicMock, patch

import pytest

from clearance.cleaners.base import CacheKind, CleanOutcome
from clearance.cli import ClearanceCLI, build_parser, main, options_from_args
from clearance.config import ClearanceConfig
from clearance.errors import AdminRequired, CleanupFailed, NotSupported, OperationCancelled
from clearance.orchestrator import CleanResult, RunSummary
from clearance.selection import parse_selection


@pytest.fixture
def orchestrator():
    mock = MagicMock()
    mock.run.return_value = RunSummary(results=[CleanResult("npm", outcome=CleanOutcome("npm", "directory"))])
    return mock


@pytest.fixture
def cli(orchestrator):
    return ClearanceCLI(ClearanceConfig(), orchestrator=orchestrator)


class TestParser:
    def test_flags(self):
        args = build_parser().parse_args(["--npm", "--docker", "--sizes"])
        options = options_from_args(args)
        assert options.kinds == (CacheKind.NPM, CacheKind.DOCKER)
        assert options.measure_sizes

    def test_positional_and_flags_merge(self):
        args = build_parser().parse_args(["3,1", "--yarn"])
        assert options_from_args(args).kinds == (CacheKind.DOCKER, CacheKind.NPM, CacheKind.YARN)

    def test_all_flag(self):
        args = build_parser().parse_args(["--all"])
        assert options_from_args(args).clean_all

    def test_no_arguments_is_empty(self):
        assert options_from_args(build_parser().parse_args([])).is_empty

    def test_version_flag(self):
        assert build_parser().parse_args(["-V"]).version


class TestExecute:
    def test_successful_cleanup(self, cli, orchestrator):
        assert cli.execute(parse_selection("npm")) == 0
        orchestrator.run.assert_called_once()

    def test_failed_cleaner_returns_one(self, cli, orchestrator):
        orchestrator.run.return_value = RunSummary(
            results=[CleanResult("npm", error=CleanupFailed("npm", "locked"))]
        )
        with patch("clearance.cli.panels.cleanup_complete") as mock_complete:
            assert cli.execute(parse_selection("npm")) == 1
        mock_complete.assert_called_once_with(1)

    def test_report(self, cli, orchestrator):
        orchestrator.run.return_value = RunSummary(sizes={"npm cache": "1.0 MB"}, report_only=True)
        with patch("clearance.cli.panels.size_report") as mock_report:
            assert cli.execute(parse_selection("report")) == 0
        mock_report.assert_called_once_with({"npm cache": "1.0 MB"})

    def test_admin_required(self, cli, orchestrator):
        orchestrator.run.side_effect = AdminRequired("this program requires administrator privileges")
        with patch("clearance.cli.panels.admin_warning") as mock_warning:
            assert cli.execute(parse_selection("winsxs")) == 1
        mock_warning.assert_called_once()

    def test_not_supported(self, cli, orchestrator):
        orchestrator.run.side_effect = NotSupported("cleanup", "no valid cleanup options specified")
        assert cli.execute(parse_selection("foo")) == 1

    def test_exit(self, cli, orchestrator):
        assert cli.execute(parse_selection("exit")) == 0
        orchestrator.run.assert_not_called()

    def test_cancel_event_shared(self, cli, orchestrator):
        cli.execute(parse_selection("npm"))
        assert orchestrator.run.call_args.args[1] is cli.cancel

    def test_cancelled_run_returns_one(self, cli, orchestrator):
        orchestrator.run.return_value = RunSummary(
            results=[
                CleanResult("npm", outcome=CleanOutcome("npm", "directory")),
                CleanResult("yarn", error=OperationCancelled()),
            ],
            cancelled=True,
        )
        with patch("clearance.cli.panels.cleanup_complete") as mock_complete:
            assert cli.execute(parse_selection("npm,yarn")) == 1
        mock_complete.assert_called_once_with(1)


class TestInteractive:
    @patch("clearance.cli.wait_for_enter")
    @patch("clearance.cli.panels.menu")
    @patch("clearance.cli.console.set_title")
    def test_loop_until_exit(self, mock_title, mock_menu, mock_wait, cli, orchestrator):
        with patch("clearance.cli.read_selection", side_effect=["9", "1", "8"]):
            assert cli.interactive() == 0

        assert mock_menu.call_count == 3
        orchestrator.run.assert_called_once()

    @patch("clearance.cli.panels.menu")
    @patch("clearance.cli.console.set_title")
    def test_eof_ends_loop(self, mock_title, mock_menu, cli):
        with patch("clearance.cli.read_selection", return_value=None):
            assert cli.interactive() == 0

    @patch("clearance.cli.wait_for_enter")
    @patch("clearance.cli.panels.menu")
    @patch("clearance.cli.console.set_title")
    def test_sigterm_ends_session(self, mock_title, mock_menu, mock_wait, cli, orchestrator):
        summary = orchestrator.run.return_value

        def cancelled_run(options, cancel):
            cancel.set()
            return summary

        orchestrator.run.side_effect = cancelled_run
        with patch("clearance.cli.read_selection", side_effect=["1", "1"]):
            assert cli.interactive() == 1

        orchestrator.run.assert_called_once()
        mock_wait.assert_not_called()


class TestMain:
    @pytest.fixture(autouse=True)
    def quiet_setup(self):
        with (
            patch("clearance.cli.load_env"),
            patch("clearance.cli.load_config", return_value=ClearanceConfig()),
            patch("clearance.cli.configure_logging"),
            patch("clearance.cli.signal.signal"),
        ):
            yield

    @patch("clearance.cli.ClearanceCLI")
    def test_selection_runs_once(self, mock_cli):
        mock_cli.return_value.execute.return_value = 0
        assert main(["1,3"]) == 0

        options = mock_cli.return_value.execute.call_args.args[0]
        assert options.kinds == (CacheKind.NPM, CacheKind.DOCKER)
        mock_cli.return_value.interactive.assert_not_called()

    @patch("clearance.cli.ClearanceCLI")
    def test_no_selection_is_interactive(self, mock_cli):
        mock_cli.return_value.interactive.return_value = 0
        assert main([]) == 0
        mock_cli.return_value.interactive.assert_called_once()

    @patch("clearance.cli.ClearanceCLI")
    def test_keyboard_interrupt(self, mock_cli):
        mock_cli.return_value.execute.side_effect = KeyboardInterrupt
        assert main(["--npm"]) == 130

    @patch("clearance.cli.ClearanceCLI")
    def test_unknown_only_selection_is_not_interactive(self, mock_cli):
        mock_cli.return_value.execute.return_value = 1
        assert main(["bogus"]) == 1
        mock_cli.return_value.interactive.assert_not_called()

    @patch("clearance.cli.ClearanceCLI")
    def test_version_shows_panel(self, mock_cli):
        with patch("clearance.cli.panels.version_panel") as mock_panel:
            assert main(["--version"]) == 0
        mock_panel.assert_called_once()
        mock_cli.assert_not_called()

    def test_bad_config(self):
        from clearance.errors import ConfigError

        with patch("clearance.cli.load_config", side_effect=ConfigError("invalid YAML")):
            assert main(["--report"]) == 1
