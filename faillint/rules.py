"""Parser for the `-paths` policy expression.

A policy is a comma separated list of rules. Each rule has up to three parts:

* import: mandatory Go import path that is unwanted, or that has unwanted
  declarations.
* declarations: optional names in `{ }`. When set, importing the package is
  fine but using any of the listed declarations is not.
* suggestion: optional text after `=`, shown with every violation.

Example::

    errors=github.com/pkg/errors,fmt.{Errorf}=github.com/pkg/errors.{Errorf}

Whitespace anywhere in the policy is ignored. Rules are matched greedily from
left to right and unparseable fragments are skipped, so a malformed policy
never fails, it just yields fewer rules.

Note that `fmt.Errorf=...` (no braces) is read as the import path
`fmt.Errorf`, because `.` is valid inside import paths.
"""

import re
from dataclasses import dataclass

PATHS_PATTERN = re.compile(
    r"(?P<import>[\w/.-]+[\w])"
    r"(\.?\{(?P<declarations>[\w,-]+)\}|)"
    r"(=(?P<suggestion>[\w/.-]+[\w](\.?\{[\w,-]+\}|))|)",
    re.ASCII,
)


@dataclass(frozen=True)
class Rule:
    """A single unwanted import, optionally narrowed to some declarations."""

    import_path: str
    declarations: tuple[str, ...] = ()
    suggestion: str = ""

    @property
    def forbids_package(self) -> bool:
        """True when the whole package is unwanted."""
        return not self.declarations

    def format(self) -> str:
        """Render the rule back in policy syntax."""
        text = self.import_path
        if self.declarations:
            text += ".{" + ",".join(self.declarations) + "}"
        if self.suggestion:
            text += "=" + self.suggestion
        return text

    def __str__(self) -> str:
        return self.format()


def trim_all_whitespace(text: str) -> str:
    """Remove every Unicode whitespace character."""
    return "".join(ch for ch in text if not ch.isspace())


def parse_paths(paths: str) -> list[Rule]:
    """Parse a policy expression into rules, in the order given.

    Duplicate rules are kept.
    """
    rules: list[Rule] = []
    for match in PATHS_PATTERN.finditer(trim_all_whitespace(paths)):
        declarations = match.group("declarations")
        rules.append(
            Rule(
                import_path=match.group("import"),
                declarations=tuple(declarations.split(",")) if declarations else (),
                suggestion=match.group("suggestion") or "",
            )
        )
    return rules


def format_paths(rules: list[Rule]) -> str:
    """Render rules as a policy expression that parses back to the same rules."""
    return ",".join(rule.format() for rule in rules)
