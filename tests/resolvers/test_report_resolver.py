"""Tests for the report file resolver."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ctagsgen.errors import ResolutionError
from ctagsgen.resolvers import ReportFileResolver


def test_reads_json_report(tmp_path: Path) -> None:
    report_path = tmp_path / "target" / "report.json"
    report_path.parent.mkdir()
    report_path.write_text(
        json.dumps(
            {
                "configurations": [
                    {
                        "name": "compile",
                        "modules": [
                            {
                                "module": "org.demo:demo:1.0",
                                "artifacts": [
                                    {"type": "jar", "file": "demo-1.0.jar"},
                                    {"type": "src", "file": "/cache/demo-1.0-sources.jar", "classifier": "sources"},
                                ],
                            }
                        ],
                    },
                    {"name": "test", "modules": []},
                ]
            }
        ),
        encoding="utf-8",
    )

    report = ReportFileResolver(Path("target/report.json")).resolve(tmp_path)

    assert [c.name for c in report.configurations] == ["compile", "test"]
    artifacts = list(report.artifacts())
    assert artifacts[0].file == report_path.parent / "demo-1.0.jar"
    assert artifacts[0].name == "org.demo:demo:1.0"
    assert artifacts[1].file == Path("/cache/demo-1.0-sources.jar")
    assert artifacts[1].classifier == "sources"
    assert [a.type for a in report.source_artifacts()] == ["src"]


def test_reads_yaml_report(tmp_path: Path) -> None:
    report_path = tmp_path / "report.yml"
    report_path.write_text(
        """
configurations:
  - name: compile
    modules:
      - module: org.demo:demo:1.0
        artifacts:
          - {type: src, file: demo-1.0-sources.jar}
""",
        encoding="utf-8",
    )

    report = ReportFileResolver(report_path).resolve(tmp_path / "elsewhere")

    assert [a.file for a in report.artifacts()] == [tmp_path / "demo-1.0-sources.jar"]


def test_missing_report_is_a_resolution_error(tmp_path: Path) -> None:
    with pytest.raises(ResolutionError):
        ReportFileResolver(tmp_path / "missing.json").resolve(tmp_path)


@pytest.mark.parametrize(
    "content",
    [
        "[1, 2]",
        "configurations: nope",
        "configurations:\n  - name: compile\n    modules:\n      - artifacts:\n          - {type: src}\n",
        "configurations: [unterminated",
    ],
)
def test_malformed_report_is_a_resolution_error(tmp_path: Path, content: str) -> None:
    report_path = tmp_path / "report.yml"
    report_path.write_text(content, encoding="utf-8")

    with pytest.raises(ResolutionError):
        ReportFileResolver(report_path).resolve(tmp_path)
