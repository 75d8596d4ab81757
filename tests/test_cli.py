from click.testing import CliRunner

from nuttgram_security import audit
from nuttgram_security.cli import cli


def test_invoke_enables_secure_mode():
    result = CliRunner().invoke(cli, ["invoke", "setSecureMode", "--secure"])

    assert result.exit_code == 0, result.output
    assert "success: null" in result.output
    assert "secure: enabled" in result.output


def test_invoke_without_argument_disables():
    result = CliRunner().invoke(cli, ["invoke", "setSecureMode", "--initial-secure"])

    assert result.exit_code == 0, result.output
    assert "secure: disabled" in result.output


def test_invoke_unknown_method_keeps_state():
    result = CliRunner().invoke(cli, ["invoke", "ping", "--initial-secure"])

    assert result.exit_code == 0, result.output
    assert "not implemented" in result.output
    assert "secure: enabled" in result.output


def test_invoke_raw_arguments():
    runner = CliRunner()

    lenient = runner.invoke(cli, ["invoke", "setSecureMode", "--raw-args", '{"secure": "yes"}', "--initial-secure"])
    assert lenient.exit_code == 0, lenient.output
    assert "secure: disabled" in lenient.output

    bad = runner.invoke(cli, ["invoke", "setSecureMode", "--raw-args", "{oops"])
    assert bad.exit_code == 2

    both = runner.invoke(cli, ["invoke", "setSecureMode", "--raw-args", "{}", "--secure"])
    assert both.exit_code == 2


def test_verify_audit(tmp_path, monkeypatch):
    monkeypatch.setenv("NUTTGRAM_AUDIT_DIR", str(tmp_path))
    good = audit.record_secure_mode(True)
    broken = tmp_path / "audit_broken.json"
    broken.write_text("{")

    runner = CliRunner()
    ok = runner.invoke(cli, ["verify-audit", str(good)])
    assert ok.exit_code == 0, ok.output
    assert f"{good}: ok" in ok.output

    failed = runner.invoke(cli, ["verify-audit", str(good), str(broken)])
    assert failed.exit_code == 1
