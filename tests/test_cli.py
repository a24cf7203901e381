from pathlib import Path

import yaml
from click.testing import CliRunner

from evbind.cli import cli


def _write_manifest(tmp_path: Path, *abis: Path) -> Path:
    manifest = {
        "name": "CliIndexer",
        "contracts": [
            {
                "name": f"Contract{i}",
                "abi": str(abi),
                "details": [{"network": "ethereum", "address": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"}],
            }
            for i, abi in enumerate(abis)
        ],
    }
    path = tmp_path / "indexer.yaml"
    path.write_text(yaml.safe_dump(manifest))
    return path


def test_topics_lists_events(erc20_abi: Path) -> None:
    result = CliRunner().invoke(cli, ["topics", str(erc20_abi)])
    assert result.exit_code == 0, result.output
    assert "Transfer" in result.output
    assert "Approval" in result.output


def test_topics_event_filter(erc20_abi: Path) -> None:
    result = CliRunner().invoke(cli, ["topics", str(erc20_abi), "--event", "Approval"])
    assert result.exit_code == 0, result.output
    assert "Approval" in result.output
    assert "Transfer" not in result.output


def test_topics_bad_abi(abi_dir: Path) -> None:
    result = CliRunner().invoke(cli, ["topics", str(abi_dir / "not_a_list.json")])
    assert result.exit_code == 1
    assert "malformed ABI" in result.output


def test_generate_writes_package(tmp_path: Path, erc20_abi: Path) -> None:
    manifest = _write_manifest(tmp_path, erc20_abi)
    out = tmp_path / "src"

    result = CliRunner().invoke(cli, ["generate", str(manifest), "--out", str(out)])

    assert result.exit_code == 0, result.output
    assert (out / "cli_indexer" / "events" / "contract0.py").exists()
    assert (out / "cli_indexer" / "handlers" / "contract0.py").exists()
    assert "contracts=1" in result.output


def test_generate_reports_failures(tmp_path: Path, erc20_abi: Path) -> None:
    manifest = _write_manifest(tmp_path, tmp_path / "missing.json", erc20_abi)

    result = CliRunner().invoke(cli, ["generate", str(manifest), "--out", str(tmp_path / "src")])

    assert result.exit_code == 1
    assert "Contract0" in result.output
    assert (tmp_path / "src" / "cli_indexer" / "events" / "contract1.py").exists()


def test_generate_fail_fast(tmp_path: Path, erc20_abi: Path) -> None:
    manifest = _write_manifest(tmp_path, tmp_path / "missing.json", erc20_abi)

    result = CliRunner().invoke(
        cli, ["generate", str(manifest), "--out", str(tmp_path / "src"), "--fail-fast"]
    )

    assert result.exit_code == 1
    assert "cannot read ABI" in result.output
    assert not (tmp_path / "src" / "cli_indexer" / "events" / "contract1.py").exists()


def test_generate_bad_manifest(tmp_path: Path) -> None:
    path = tmp_path / "indexer.yaml"
    path.write_text("name: [unclosed")

    result = CliRunner().invoke(cli, ["generate", str(path)])

    assert result.exit_code == 1
    assert "cannot parse manifest" in result.output
