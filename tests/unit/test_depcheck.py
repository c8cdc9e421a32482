from __future__ import annotations

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "tools"))

import depcheck


def test_depcheck_fails_on_forbidden_import(tmp_path: Path) -> None:
    domain_dir = tmp_path / "domain"
    domain_dir.mkdir(parents=True, exist_ok=True)

    violating_file = domain_dir / "model.py"
    violating_file.write_text("import sqlalchemy\n", encoding="utf-8")

    script_path = ROOT / "tools" / "depcheck.py"
    result = subprocess.run(
        [sys.executable, str(script_path), "--path", str(domain_dir), "--layer", "domain"],
        capture_output=True,
        text=True,
        check=False,
    )

    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode != 0
    assert "sqlalchemy" in combined_output
    assert str(violating_file) in combined_output


def test_application_layer_may_use_pydantic_but_not_infrastructure(tmp_path: Path) -> None:
    use_case = tmp_path / "use_case.py"
    use_case.write_text(
        "from pydantic import BaseModel\n"
        "from comanda.infrastructure.db.session import get_engine\n",
        encoding="utf-8",
    )

    violations = depcheck.find_violations([use_case], layer="application")

    assert [(violation.line, violation.module) for violation in violations] == [
        (2, "comanda.infrastructure.db.session"),
    ]


def test_domain_layer_may_not_reach_the_application_layer(tmp_path: Path) -> None:
    entity = tmp_path / "entity.py"
    entity.write_text("from comanda.application.ports.repositories import PriceCatalog\n")

    violations = depcheck.find_violations([entity], layer="domain")

    assert [violation.layer for violation in violations] == ["domain"]


def test_source_tree_respects_layer_rules() -> None:
    assert depcheck.main([]) == 0
