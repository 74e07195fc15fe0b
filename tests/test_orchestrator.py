"""Tests for hubdocs.orchestrator."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hubdocs.errors import RegistryError
from hubdocs.manifest import MANIFEST_FILENAME
from hubdocs.orchestrator import Orchestrator
from hubdocs.providers import FILESYSTEM_MODE, HUB_MODE, RegistryProvider
from hubdocs.registry import ExampleEntry
from tests._fixtures.project_builder import ProjectBuilder

ALPHA_SOURCE = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.24;

/**
 * @title Alpha
 * @notice Alpha stores encrypted values
 */
contract Alpha {
    event Stored(address indexed user);

    function store() external {
        emit Stored(msg.sender);
    }
}
"""

BETA_SOURCE = """\
pragma solidity ^0.8.24;

/**
 * @title Beta
 */
contract Beta {
    function noop() external pure {}
}
"""

EQUALITY_SOURCE = """\
pragma solidity ^0.8.24;

/// @notice Compares two encrypted values
contract EncryptedEquality {}
"""

EQUALITY_TESTS = """\
describe("EncryptedEquality", function () {
  it("should return 1 when two encrypted values are equal", async function () {});
  it("should return 0 when two encrypted values are not equal", async function () {});
});
"""


def _registry_entry(contract: str, source: str, scenario: str, category: str = "basic") -> dict:
    return {
        "name": f"{contract} Example",
        "description": f"{contract} from the registry",
        "contract_name": contract,
        "category": category,
        "contract_code": source,
        "test_code": f'describe("{contract}", () => {{\n  it("{scenario}", async () => {{}});\n}});\n',
    }


def _alpha_beta_registry(project_builder: ProjectBuilder, *, include_beta: bool = True) -> None:
    examples = {"alpha": _registry_entry("Alpha", ALPHA_SOURCE, "stores a value")}
    if include_beta:
        examples["beta"] = _registry_entry("Beta", BETA_SOURCE, "does nothing")
    project_builder.write_registry(examples)


def _snapshot(output: Path) -> dict[str, bytes]:
    return {path.name: path.read_bytes() for path in sorted(output.iterdir()) if path.is_file()}


def test_hub_build_end_to_end(project_builder: ProjectBuilder) -> None:
    _alpha_beta_registry(project_builder)

    result = project_builder.build()

    assert result.mode == HUB_MODE
    assert result.manifest.sorted_files() == ["Alpha.md", "Beta.md", "README.md", "SUMMARY.md"]
    assert sorted(path.name for path in project_builder.output.iterdir()) == [
        MANIFEST_FILENAME,
        "Alpha.md",
        "Beta.md",
        "README.md",
        "SUMMARY.md",
    ]

    index = project_builder.page("README.md")
    assert index.count("### ") == 1
    assert (
        "### Basic\n\n"
        "- **[Alpha](Alpha.md)**: Alpha stores encrypted values (key: `alpha`)\n"
        "- **[Beta](Beta.md)**: Beta (key: `beta`)\n"
    ) in index

    alpha = project_builder.page("Alpha.md")
    assert "## Events\n\n- `Stored`\n" in alpha
    assert "## Tests\n\n- stores a value\n" in alpha
    assert "Category: Basic" in alpha

    beta = project_builder.page("Beta.md")
    assert "## Events" not in beta
    assert "## Tests\n\n- does nothing\n" in beta

    summary = project_builder.page("SUMMARY.md")
    assert "### Basic\n\n* [Alpha](Alpha.md)\n* [Beta](Beta.md)\n" in summary

    payload = json.loads((project_builder.output / MANIFEST_FILENAME).read_text(encoding="utf-8"))
    assert payload == {"files": ["Alpha.md", "Beta.md", "README.md", "SUMMARY.md"]}


def test_build_is_idempotent(project_builder: ProjectBuilder) -> None:
    _alpha_beta_registry(project_builder)

    first = project_builder.build()
    first_snapshot = _snapshot(project_builder.output)
    second = project_builder.build()

    assert second.manifest == first.manifest
    assert second.removed == []
    assert _snapshot(project_builder.output) == first_snapshot


def test_rerun_removes_pages_dropped_from_registry(project_builder: ProjectBuilder) -> None:
    _alpha_beta_registry(project_builder)
    project_builder.build()
    alpha_before = project_builder.page("Alpha.md")

    _alpha_beta_registry(project_builder, include_beta=False)
    result = project_builder.build()

    assert not (project_builder.output / "Beta.md").exists()
    assert [path.name for path in result.removed] == ["Beta.md"]
    assert project_builder.page("Alpha.md") == alpha_before
    assert result.manifest.sorted_files() == ["Alpha.md", "README.md", "SUMMARY.md"]
    assert "Beta" not in project_builder.page("SUMMARY.md")


def test_rerun_preserves_user_content(project_builder: ProjectBuilder) -> None:
    _alpha_beta_registry(project_builder)
    project_builder.build()
    notes = project_builder.output / "NOTES.md"
    notes.write_text("hand written\n", encoding="utf-8")

    project_builder.build()

    assert notes.read_text(encoding="utf-8") == "hand written\n"


def test_injected_out_of_tree_manifest_entry_is_never_deleted(project_builder: ProjectBuilder) -> None:
    _alpha_beta_registry(project_builder)
    outside = project_builder.path() / "IMPORTANT.md"
    outside.write_text("keep\n", encoding="utf-8")
    project_builder.output.mkdir()
    (project_builder.output / MANIFEST_FILENAME).write_text(
        json.dumps({"files": ["../IMPORTANT.md", "README.md"]}), encoding="utf-8"
    )

    project_builder.build()

    assert outside.read_text(encoding="utf-8") == "keep\n"


def test_registry_test_cases_keep_extraction_order(project_builder: ProjectBuilder) -> None:
    entry = _registry_entry("EncryptedEquality", EQUALITY_SOURCE, "unused")
    entry["test_code"] = EQUALITY_TESTS
    project_builder.write_registry({"encrypted-equality": entry})

    project_builder.build()

    page = project_builder.page("EncryptedEquality.md")
    assert (
        "## Tests\n\n"
        "- should return 1 when two encrypted values are equal\n"
        "- should return 0 when two encrypted values are not equal\n"
    ) in page
    assert page.startswith("# EncryptedEquality\n\nCompares two encrypted values\n")


def test_registry_walkthrough_is_embedded_without_duplicate_title(project_builder: ProjectBuilder) -> None:
    entry = _registry_entry("Alpha", ALPHA_SOURCE, "stores a value")
    entry["documentation"] = "# Alpha\n\nStep one.\n"
    project_builder.write_registry({"alpha": entry})

    project_builder.build()

    page = project_builder.page("Alpha.md")
    assert "## Walkthrough\n\nStep one.\n" in page
    assert page.splitlines().count("# Alpha") == 1


def test_filesystem_build_uses_default_chapter_and_describe_association(
    project_builder: ProjectBuilder,
) -> None:
    project_builder.write(
        {
            "contracts/Counter.sol": """
            /**
             * @notice Counts encrypted increments
             */
            contract Counter {
                event Incremented(uint256 by);
            }
            """,
            "contracts/legacy/Vault.sol": """
            /**
             * @notice Holds deposits
             * @custom:chapter defi
             */
            contract Vault {}
            """,
            "test/CounterSpec.test.ts": """
            describe("Counter", function () {
              it("increments", async function () {});
            });
            """,
            "test/Vault.test.ts": """
            it("holds deposits", async function () {});
            """,
        }
    )

    result = project_builder.build()

    assert result.mode == FILESYSTEM_MODE
    index = project_builder.page("README.md")
    assert "### General\n\n- **[Counter](Counter.md)**: Counts encrypted increments\n" in index
    assert "### Defi\n\n- **[Vault](Vault.md)**: Holds deposits\n" in index
    assert "(key:" not in index
    counter = project_builder.page("Counter.md")
    assert "Category: General" in counter
    assert "## Run Locally" not in counter
    assert "## Tests\n\n- increments\n" in counter
    assert "## Tests\n\n- holds deposits\n" in project_builder.page("Vault.md")


def test_filesystem_build_skips_unparseable_and_duplicate_units(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "contracts/A/Same.sol": "/** @notice first */\ncontract Same {}\n",
            "contracts/B/Same.sol": "/** @notice second */\ncontract Same {}\n",
            "contracts/Empty.sol": "pragma solidity ^0.8.24;\n",
        }
    )

    result = project_builder.build()

    assert result.manifest.sorted_files() == ["README.md", "SUMMARY.md", "Same.md"]
    assert result.skipped == ["Empty.sol", "Same.sol"]
    assert "first" in project_builder.page("Same.md")


def test_force_hub_without_registry_fails(project_builder: ProjectBuilder) -> None:
    with pytest.raises(RegistryError):
        project_builder.build(force_hub=True)
    assert not project_builder.output.exists()


def test_include_functions_override(project_builder: ProjectBuilder) -> None:
    _alpha_beta_registry(project_builder, include_beta=False)

    project_builder.build(include_functions=True)

    assert "## Functions\n\n### store\n" in project_builder.page("Alpha.md")


def test_orchestrator_accepts_injected_provider(tmp_path: Path) -> None:
    entry = ExampleEntry(
        key="alpha",
        name="Alpha",
        description="Alpha from the registry",
        contract_name="Alpha",
        category="basic",
        contract_code=ALPHA_SOURCE,
        test_code='it("stores", async () => {});\n',
    )
    output = tmp_path / "out"

    result = Orchestrator(provider=RegistryProvider([entry])).run(tmp_path, output)

    assert result.mode == HUB_MODE
    assert "## Tests\n\n- stores\n" in (output / "Alpha.md").read_text(encoding="utf-8")


def test_rejected_duplicate_registry_entry_contributes_no_tests(project_builder: ProjectBuilder) -> None:
    source = "/** @notice Shared name */\ncontract Same {}\n"
    project_builder.write_registry(
        {
            "first": _registry_entry("Same", source, "first scenario"),
            "second": _registry_entry("Same", source, "rejected scenario"),
        }
    )

    result = project_builder.build()

    assert result.skipped == ["Same.sol"]
    page = project_builder.page("Same.md")
    assert "## Tests\n\n- first scenario\n" in page
    assert "rejected scenario" not in page
    assert "(key: `second`)" not in project_builder.page("README.md")


def test_registry_tests_follow_the_declaration_actually_documented(project_builder: ProjectBuilder) -> None:
    entry = _registry_entry("Wanted", "/** @notice Real contract */\ncontract Actual {}\n", "scenario x")
    project_builder.write_registry({"wanted": entry})

    result = project_builder.build()

    assert result.manifest.sorted_files() == ["Actual.md", "README.md", "SUMMARY.md"]
    assert "## Tests\n\n- scenario x\n" in project_builder.page("Actual.md")


def test_units_named_after_generated_pages_are_skipped(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "contracts/A.sol": "/** @notice First */\ncontract A {}\n",
            "contracts/README.sol": "/** @notice x */\ncontract README {}\n",
            "contracts/Summary.sol": "/** @notice y */\ncontract Summary {}\n",
        }
    )

    result = project_builder.build()

    assert result.skipped == ["README.sol", "Summary.sol"]
    assert result.manifest.sorted_files() == ["A.md", "README.md", "SUMMARY.md"]
    index = project_builder.page("README.md")
    assert index.startswith("# FHEVM Examples\n")
    assert "- **[A](A.md)**: First\n" in index
    assert project_builder.page("SUMMARY.md").startswith("# Summary\n")
