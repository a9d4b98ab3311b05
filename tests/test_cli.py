import io
import json

from stdcheck import cli


def test_cli_generates_json_report_for_violation(tmp_path, capsys):
    target = tmp_path / "app.py"
    target.write_text("def handler(userInput):\n    return eval(userInput)\n", encoding="utf-8")
    output_path = tmp_path / "reports" / "compliance.json"

    exit_code = cli.main([str(target), "--standard", "security", "--out", str(output_path)])

    captured = capsys.readouterr()
    assert "Compliance Summary" in captured.out
    assert exit_code == 1
    data = json.loads(output_path.read_text(encoding="utf-8"))
    findings = {finding["ruleId"]: finding for finding in data["findings"]}
    assert findings["SEC-001"]["status"] == "VIOLATED"
    assert findings["SEC-001"]["evidence"] == "eval(userInput)"
    assert data["score"] < 1
    assert data["passed"] is False


def test_cli_passes_on_clean_file(tmp_path, capsys):
    target = tmp_path / "clean.py"
    target.write_text('"""Clean module."""\n\n\ndef add(a, b):\n    return a + b\n', encoding="utf-8")

    exit_code = cli.main([str(target), "-s", "security", "-s", "naming", "--out", str(tmp_path / "r.json")])

    capsys.readouterr()
    assert exit_code == 0
    data = json.loads((tmp_path / "r.json").read_text(encoding="utf-8"))
    assert data["summary"]["violated"] == 0
    assert data["standards"] == ["security", "naming"]


def test_cli_text_target_prints_markdown(capsys):
    exit_code = cli.main(["--text", '<div><img src="a.png"></div>', "-s", "ux", "--format", "markdown", "-q"])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "Compliance Summary" not in out
    assert out.startswith("# Compliance report: <text>")
    assert "| UX-001 | MUST | accessibility | Violated |" in out


def test_cli_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("print('hello')\n"))

    exit_code = cli.main(["-", "-s", "ux", "-q"])

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert data["target"] == "<stdin>"
    assert data["score"] == "N/A"


def test_cli_unknown_standard_exits_with_configuration_error(capsys):
    exit_code = cli.main(["--text", "x = 1", "--standard", "astrology"])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert "unknown standard 'astrology'" in captured.err
    assert captured.out == ""


def test_cli_missing_target_is_an_input_error(tmp_path, capsys):
    exit_code = cli.main([str(tmp_path / "nope.py"), "-s", "security"])

    assert exit_code == 2
    assert "target not found" in capsys.readouterr().err


def test_cli_requires_a_standard_and_a_target(capsys):
    assert cli.main(["--text", "x = 1"]) == 2
    assert cli.main(["-s", "security"]) == 2
    err = capsys.readouterr().err
    assert "no standard selected" in err
    assert "no target given" in err


def test_cli_recovers_from_undecodable_target(tmp_path, capsys):
    target = tmp_path / "binary.py"
    target.write_bytes(b"\xff\xfe\x00\x81garbage")

    exit_code = cli.main([str(target), "-s", "security", "-q"])

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert len(data["warnings"]) == 1
    assert "not valid UTF-8" in data["warnings"][0]
    assert {finding["status"] for finding in data["findings"]} == {"MANUAL_REVIEW"}


def test_cli_undecodable_markdown_needs_manual_review(tmp_path, capsys):
    target = tmp_path / "README.md"
    target.write_bytes(b"# Title\n\xff\xfe broken")

    exit_code = cli.main([str(target), "-s", "documentation", "-q"])

    data = json.loads(capsys.readouterr().out)
    findings = {finding["ruleId"]: finding for finding in data["findings"]}
    assert exit_code == 0
    assert findings["DOC-003"]["status"] == "MANUAL_REVIEW"
    assert findings["DOC-003"]["note"] == "target could not be read"


def test_cli_undecodable_target_does_not_score_as_passing(tmp_path, capsys):
    target = tmp_path / "app.py"
    target.write_bytes(b"x = eval(userInput)\n\xff")

    exit_code = cli.main([str(target), "-s", "security", "-q"])

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert data["summary"]["violated"] == 0
    assert data["summary"]["passed"] == 0
    assert data["score"] == "N/A"


def test_cli_lists_standards(capsys):
    assert cli.main(["--list-standards"]) == 0

    names = capsys.readouterr().out.split()
    assert "security" in names
    assert "cryptography" in names


def test_cli_all_standards(capsys):
    exit_code = cli.main(["--text", "", "-s", "all", "-q"])

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert "security" in data["standards"]
    assert "ux" in data["standards"]


def test_cli_empty_rule_set_reports_na(tmp_path, capsys):
    (tmp_path / "empty.yaml").write_text("rules: []\n", encoding="utf-8")

    exit_code = cli.main(["--text", "", "-s", "empty", "--rules-dir", str(tmp_path), "-q"])

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert data["score"] == "N/A"
    assert data["findings"] == []


def test_cli_applies_config_file(tmp_path, capsys):
    config = tmp_path / "stdcheck.yaml"
    config.write_text(
        "standards: [security]\ndisabled_rules: [SEC-001]\nfail_on: SHOULD\nformat: json\n",
        encoding="utf-8",
    )

    exit_code = cli.main(
        ["--text", "subprocess.run(cmd, shell=True)\nresult = eval(userInput)\n", "--config", str(config), "-q"]
    )

    data = json.loads(capsys.readouterr().out)
    rule_ids = [finding["ruleId"] for finding in data["findings"]]
    assert "SEC-001" not in rule_ids
    assert data["failOn"] == "SHOULD"
    assert exit_code == 1


def test_cli_should_violation_passes_at_must_threshold(capsys):
    exit_code = cli.main(["--text", "subprocess.run(cmd, shell=True)\n", "-s", "security", "--fail-on", "MUST", "-q"])

    capsys.readouterr()
    assert exit_code == 0


def test_cli_unwritable_output_is_a_configuration_error(tmp_path, capsys):
    blocker = tmp_path / "reports"
    blocker.write_text("not a directory", encoding="utf-8")

    exit_code = cli.main(["--text", "x = 1\n", "-s", "security", "--out", str(blocker / "r.json")])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert "cannot write report" in captured.err
    assert "Traceback" not in captured.err


def test_cli_repeated_standard_is_evaluated_once(capsys):
    exit_code = cli.main(["--text", "x = 1\n", "-s", "security", "-s", "SECURITY", "-q"])

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert data["standards"] == ["security"]
