"""End-to-end CLI runs through ``python -m flowshape.cli``."""

import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def run(*args):
    env = dict(os.environ)
    env.pop("FLOWSHAPE_LOG_HUMAN", None)
    env.pop("FLOWSHAPE_CONFIG_DIR", None)
    env.pop("FLOWSHAPE_ROOT", None)
    env.pop("FLOWSHAPE_ENV", None)
    env["PYTHONPATH"] = str(ROOT / "src")
    return subprocess.run(
        [sys.executable, "-m", "flowshape.cli", *args],
        capture_output=True,
        text=True,
        timeout=60,
        cwd=ROOT,
        env=env,
    )


def test_health():
    result = run("health")
    assert result.returncode == 0
    assert "'ok': True" in result.stdout


def test_profiles_lists_formats():
    result = run("profiles", "--env", "dev")
    assert result.returncode == 0
    assert "orders_sql\tsql" in result.stdout
    assert "orders_json\tjson" in result.stdout


def test_to_xml_with_profile(tmp_path):
    inp = tmp_path / "orders.json"
    inp.write_text('{"orders": [{"id": 1}, {"id": 2}]}', encoding="utf-8")
    result = run("to-xml", str(inp), "--profile", "orders_json")
    assert result.returncode == 0, result.stdout + result.stderr
    assert "<Orders>" in result.stdout
    assert result.stdout.count("<order>") == 2


def test_to_xml_sniffs_csv(tmp_path):
    inp = tmp_path / "rows.csv"
    inp.write_text("id,name\n1,Ann\n", encoding="utf-8")
    out = tmp_path / "rows.xml"
    result = run("to-xml", str(inp), "--output", str(out))
    assert result.returncode == 0, result.stdout + result.stderr
    text = out.read_text(encoding="utf-8")
    assert "<fileContent>" in text
    assert "<name>Ann</name>" in text


def test_from_xml_to_json(tmp_path):
    inp = tmp_path / "in.xml"
    inp.write_text("<r><v>1</v><v>2</v></r>", encoding="utf-8")
    out = tmp_path / "out.json"
    result = run("from-xml", str(inp), "--to", "json", "--output", str(out))
    assert result.returncode == 0, result.stdout + result.stderr
    assert json.loads(out.read_text(encoding="utf-8")) == {"v": [1, 2]}


def test_from_xml_sql_profile(tmp_path):
    inp = tmp_path / "in.xml"
    inp.write_text("<orders><o><id>1</id></o><o><id>2</id></o></orders>", encoding="utf-8")
    result = run("from-xml", str(inp), "--profile", "orders_sql")
    assert result.returncode == 0, result.stdout + result.stderr
    assert "INSERT INTO orders(id) VALUES(1);" in result.stdout
    assert "INSERT INTO orders(id) VALUES(2);" in result.stdout


def test_from_xml_needs_profile_or_target(tmp_path):
    inp = tmp_path / "in.xml"
    inp.write_text("<r/>", encoding="utf-8")
    result = run("from-xml", str(inp))
    assert result.returncode != 0


def test_unknown_profile_exits_with_2(tmp_path):
    inp = tmp_path / "in.xml"
    inp.write_text("<r/>", encoding="utf-8")
    result = run("from-xml", str(inp), "--profile", "nope")
    assert result.returncode == 2
    assert "Unknown profile" in result.stdout


def test_conversion_error_exits_with_2(tmp_path):
    inp = tmp_path / "bad.xml"
    inp.write_text("<r>", encoding="utf-8")
    result = run("from-xml", str(inp), "--to", "json")
    assert result.returncode == 2
    assert "error" in result.stdout


def test_missing_input_exits_with_2(tmp_path):
    result = run("from-xml", str(tmp_path / "missing.xml"), "--to", "json")
    assert result.returncode == 2


def test_to_xml_uses_env_conversion_defaults(tmp_path):
    inp = tmp_path / "in.json"
    inp.write_text('{"a": 1}', encoding="utf-8")
    out = tmp_path / "out.xml"
    result = run("to-xml", str(inp), "--adapter", "REST", "--env", "prod", "--output", str(out))
    assert result.returncode == 0, result.stdout + result.stderr
    # prod turns pretty printing off
    assert "<Message><a>1</a></Message>" in out.read_text(encoding="utf-8")
