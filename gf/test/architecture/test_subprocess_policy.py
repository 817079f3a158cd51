from __future__ import annotations

import ast
from pathlib import Path

GF_ROOT = Path(__file__).resolve().parents[2]
ALLOWLIST = {"platform/process.py"}


def _python_files() -> list[Path]:
    files: list[Path] = []
    for path in sorted(GF_ROOT.rglob("*.py")):
        rel = path.relative_to(GF_ROOT)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def _subprocess_imports(tree: ast.AST) -> list[int]:
    lines: list[int] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            if any(alias.name == "subprocess" for alias in node.names):
                lines.append(node.lineno)
        elif isinstance(node, ast.ImportFrom) and node.module == "subprocess":
            lines.append(node.lineno)
    return lines


def test_only_the_process_module_spawns_tools() -> None:
    offenders: list[str] = []
    for path in _python_files():
        rel = path.relative_to(GF_ROOT).as_posix()
        if rel in ALLOWLIST:
            continue
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for line in _subprocess_imports(tree):
            offenders.append(f"{rel}:{line}: subprocess imported outside platform/process.py")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)


def test_flows_do_not_import_the_cli() -> None:
    offenders: list[str] = []
    for path in sorted((GF_ROOT / "flow").rglob("*.py")):
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for node in ast.walk(tree):
            if isinstance(node, ast.ImportFrom) and (node.module or "").startswith("gf.cli"):
                offenders.append(f"{path.name}:{node.lineno}: {node.module}")

    assert not offenders, "flow -> cli dependency violations:\n" + "\n".join(offenders)
