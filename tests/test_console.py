"""Tests for console.py module."""

from unittest.mock import patch

from chartcmd import console


class TestConsoleOutput:
    """Tests for console output functions."""

    def test_info_message(self):
        """Test info message format."""
        with patch.object(console.console, "print") as mock_print:
            console.info("No version given")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "ℹ" in call_arg
            assert "No version given" in call_arg

    def test_success_message(self):
        """Test success message format."""
        with patch.object(console.console, "print") as mock_print:
            console.success("Added repository")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "✓" in call_arg
            assert "Added repository" in call_arg

    def test_warning_message(self):
        """Test warning message format."""
        with patch.object(console.console, "print") as mock_print:
            console.warning("Failed to remove helm home")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "⚠" in call_arg
            assert "Failed to remove helm home" in call_arg

    def test_error_message(self):
        """Test error message format."""
        with patch.object(console.console, "print") as mock_print:
            console.error("helm failed")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "✗" in call_arg
            assert "helm failed" in call_arg

    def test_action_message(self):
        """Test action message format."""
        with patch.object(console.console, "print") as mock_print:
            console.action("Using helm v3")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "→" in call_arg
            assert "Using helm v3" in call_arg

    def test_step_message(self):
        """Test step message format."""
        with patch.object(console.console, "print") as mock_print:
            console.step("Initialising helm client")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "•" in call_arg
            assert "Initialising helm client" in call_arg

    def test_highlight_returns_markup(self):
        """Test highlight returns Rich markup."""
        result = console.highlight("stable")
        assert result == "[highlight]stable[/highlight]"

    def test_writes_to_stderr(self):
        """Test messages never mix with manifests on stdout."""
        assert console.console.stderr is True


class TestConsoleSpinner:
    """Tests for spinner context manager."""

    def test_spinner_context_manager(self):
        """Test spinner works as context manager."""
        with patch.object(console.console, "status") as mock_status:
            mock_status.return_value.__enter__ = lambda x: None
            mock_status.return_value.__exit__ = lambda x, *args: None
            with console.spinner("Fetching nginx..."):
                pass
            mock_status.assert_called_once()


class TestConsoleSummaryPanel:
    """Tests for summary panel."""

    def test_summary_panel(self):
        """Test summary panel renders."""
        with patch.object(console.console, "print") as mock_print:
            console.summary_panel("helm profile", {"Generation": "v3", "Binary": "helm"})
            mock_print.assert_called_once()
