"""JSON report renderer."""

import json
import re
from datetime import datetime
from typing import TextIO

from mess_detector.domain.constants import REPORT_PACKAGE, VERSION
from mess_detector.domain.protocols import RendererProtocol
from mess_detector.domain.report import Report

# A JSON string token, escapes included.
_STRING_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"')
# Inside a token: an existing escape sequence, or a character unsafe for embedding.
_UNSAFE = re.compile(r"""\\.|[<>&']""")
_HEX_ESCAPES = {
    "<": "\\u003C",
    ">": "\\u003E",
    "&": "\\u0026",
    "'": "\\u0027",
    '\\"': "\\u0022",
}


class JSONRenderer(RendererProtocol):
    """
    Renders a Report as a pretty-printed JSON document.

    Files are grouped in the order the report yields its sorted violations.
    Angle brackets, ampersands and both quote characters inside strings are
    written as ``\\uXXXX`` escapes so the document can be embedded in HTML.
    """

    def __init__(self, version: str = VERSION, indent: int = 4) -> None:
        self._version = version
        self._indent = indent

    def render(self, report: Report) -> str:
        data = self._init_report_data()
        data["files"] = self._files(report)
        errors = self._errors(report)
        if errors:
            data["errors"] = errors
        return self._encode(data) + "\n"

    def write(self, report: Report, stream: TextIO) -> None:
        stream.write(self.render(report))

    def _init_report_data(self) -> dict[str, object]:
        return {
            "version": self._version,
            "package": REPORT_PACKAGE,
            "timestamp": datetime.now().astimezone().isoformat(timespec="seconds"),
        }

    def _files(self, report: Report) -> list[dict[str, object]]:
        files: dict[str, list[dict[str, object]]] = {}
        for violation in report.iter_violations():
            rule = violation.rule
            files.setdefault(violation.file_path, []).append(
                {
                    "beginLine": violation.begin_line,
                    "endLine": violation.end_line,
                    "package": violation.namespace_name,
                    "function": violation.function_name,
                    "class": violation.class_name,
                    "method": violation.method_name,
                    "description": violation.description,
                    "rule": rule.name,
                    "ruleSet": rule.ruleset_name,
                    "externalInfoUrl": rule.external_info_url,
                    "priority": rule.priority,
                }
            )
        return [
            {"file": file_path, "violations": violations}
            for file_path, violations in files.items()
        ]

    def _errors(self, report: Report) -> list[dict[str, str]]:
        return [
            {"fileName": error.file_path, "message": error.message}
            for error in report.errors()
        ]

    def _encode(self, data: dict[str, object]) -> str:
        text = json.dumps(data, indent=self._indent)
        return _STRING_TOKEN.sub(lambda token: self._escape_token(token.group(0)), text)

    @staticmethod
    def _escape_token(token: str) -> str:
        inner = _UNSAFE.sub(
            lambda match: _HEX_ESCAPES.get(match.group(0), match.group(0)), token[1:-1]
        )
        return f'"{inner}"'
