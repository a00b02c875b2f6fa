from __future__ import annotations

from typing import Optional, Tuple

DEFAULT_PROGRAM_NAME = "onesamp"

README_HINT = "Error reading inputs. Please see the README for details."


class OneSampError(ValueError):
    """
    Base class for fatal configuration errors.

    Messages are templates whose `{program}` field is filled with the program
    name taken from argv[0]. The library never prints or exits; the binary
    calls `format_report()` and decides the exit status.
    """

    header = "ONESAMP ERROR"

    def __init__(self, template: str, program_name: Optional[str] = None, **values) -> None:
        self.template = template
        self.program_name = program_name or DEFAULT_PROGRAM_NAME
        self.values = values
        self.message = template.format(program=self.program_name, **values)
        super().__init__(self.message)

    def _report_lines(self) -> list[str]:
        return [self.header, self.message]

    def format_report(self) -> str:
        lines = self._report_lines()
        lines.append("Exiting...")
        return "\n".join(lines) + "\n"


class OneSampGeneralError(OneSampError):
    pass


class OneSampParseError(OneSampError):
    def __init__(
        self,
        template: str,
        row: int,
        column: int,
        program_name: Optional[str] = None,
        **values,
    ) -> None:
        self.row = row
        self.column = column
        super().__init__(template, program_name, **values)

    def _report_lines(self) -> list[str]:
        return [f"ONESAMP PARSE ERROR, line {self.row}, column {self.column} ", self.message]


class OneSampArgumentError(OneSampError):
    def __init__(
        self,
        template: str,
        program_name: Optional[str] = None,
        flag: Optional[str] = None,
        recommended: Optional[Tuple[float, float]] = None,
        **values,
    ) -> None:
        self.flag = flag
        self.recommended = recommended
        super().__init__(template, program_name, **values)

    def _report_lines(self) -> list[str]:
        return [self.header, self.message, README_HINT, ""]


def duplicate_flag_error(flag: str, label: Optional[str] = None, program_name: Optional[str] = None) -> OneSampArgumentError:
    return OneSampArgumentError(
        "Duplicate flag: {label}",
        program_name,
        flag=flag,
        label=label or f"-{flag}",
    )
