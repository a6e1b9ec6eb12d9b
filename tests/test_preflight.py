"""Tests for pre-flight checks."""

import pytest

from dot_install.exceptions import InstallAborted, MissingDependencyError, RootUserError
from dot_install.preflight import (
    check_existing_config,
    check_not_root,
    check_requirements,
    find_secret,
    scan_for_secrets,
)

from conftest import ScriptedPrompter


LEAKY_LINE = 'export DB_PASSWORD="hunter2hunter2"\n'


def test_root_is_refused(make_config, reporter):
    """Test the superuser is refused."""
    config = make_config(euid=0)

    with pytest.raises(RootUserError) as exc_info:
        check_not_root(config, reporter)

    assert exc_info.value.exit_code == 1
    assert reporter.counts["ERROR"] == 1


def test_regular_user_passes(make_config, reporter):
    check_not_root(make_config(euid=1000), reporter)
    assert reporter.counts["ERROR"] == 0


def test_missing_requirements_listed(make_config, reporter, output):
    """Test every missing required tool is reported."""
    config = make_config(available={"git", "apt"})

    with pytest.raises(MissingDependencyError) as exc_info:
        check_requirements(config, reporter)

    assert exc_info.value.missing == ["curl"]
    assert exc_info.value.exit_code == 2
    assert "Missing required dependencies: curl" in output.getvalue()


def test_requirements_report_package_manager(make_config, reporter, output):
    """Test the detected package manager is reported."""
    check_requirements(make_config(), reporter)

    assert "APT detected" in output.getvalue()
    assert reporter.counts["SUCCESS"] == 1


def test_no_package_manager_is_only_a_warning(make_config, reporter):
    """Test a missing package manager does not fail."""
    check_requirements(make_config(available={"git", "curl"}), reporter)
    assert reporter.counts["WARN"] == 1


def test_existing_config_reported(make_config, reporter, temp_home):
    """Test existing shell startup files are listed."""
    (temp_home / ".bashrc").write_text("export PATH\n")
    (temp_home / ".profile").write_text("")

    found = check_existing_config(make_config(), reporter)

    assert found == [".bashrc", ".profile"]


class TestSecretScan:
    def test_clean_home(self, make_config, reporter):
        prompter = ScriptedPrompter()
        assert scan_for_secrets(make_config(), prompter, reporter) is None
        assert prompter.asked == []

    def test_non_interactive_proceeds(self, make_config, reporter, output, temp_home):
        """Test unattended runs warn and continue."""
        (temp_home / ".bashrc").write_text(LEAKY_LINE)
        prompter = ScriptedPrompter()

        match = scan_for_secrets(make_config(environ={"CI": "true"}), prompter, reporter)

        assert match.file == temp_home / ".bashrc"
        assert match.pattern_name == "Password Assignment"
        assert prompter.asked == []
        assert "proceeding despite potential secrets" in output.getvalue()

    def test_interactive_decline_aborts(self, make_config, reporter, temp_home):
        """Test answering no aborts the run."""
        (temp_home / ".bashrc").write_text(LEAKY_LINE)
        prompter = ScriptedPrompter(answers={"Continue anyway?": False})

        with pytest.raises(InstallAborted):
            scan_for_secrets(make_config(), prompter, reporter)

        assert prompter.asked == ["Continue anyway?"]

    def test_interactive_accept_continues(self, make_config, reporter, temp_home):
        (temp_home / ".bashrc").write_text(LEAKY_LINE)
        prompter = ScriptedPrompter(answers={"Continue anyway?": True})

        assert scan_for_secrets(make_config(), prompter, reporter) is not None

    def test_secrets_file_and_backups_not_scanned(self, make_config, temp_home):
        """Test the secrets file and old backups are not scanned."""
        (temp_home / ".secrets").write_text(LEAKY_LINE)
        backup = temp_home / ".dotfiles_backup_20240101_120000"
        backup.mkdir()
        (backup / ".bashrc").write_text(LEAKY_LINE)

        assert find_secret(make_config()) is None
