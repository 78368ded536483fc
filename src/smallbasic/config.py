"""
User settings for the Small Basic tools.

Settings arrive from the editor as the ``smallBasic`` configuration
section (camelCase keys) and can be overridden from the environment.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

DEFAULT_COMPILER_PATH = r"C:\Program Files (x86)\Microsoft\Small Basic\SmallBasicCompiler.exe"
COMPILER_PATH_ENV = "SMALLBASIC_COMPILER"
SETTINGS_SECTION = "smallBasic"


@dataclass(frozen=True)
class Settings:
    """
    Configuration for compiling and editing Small Basic programs.

    Attributes:
        compiler_path: Path to SmallBasicCompiler.exe
        max_number_of_problems: Upper bound on diagnostics published per document
        enable_auto_parentheses: Insert ``()`` after completed method names
    """

    compiler_path: str = DEFAULT_COMPILER_PATH
    max_number_of_problems: int = 1000
    enable_auto_parentheses: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Settings":
        """
        Build settings from an editor configuration section.

        Accepts either the ``smallBasic`` section itself or a mapping
        containing it. Missing or wrongly typed values keep their defaults.
        """
        if not data:
            return cls()
        section = data.get(SETTINGS_SECTION, data)
        if not isinstance(section, Mapping):
            return cls()

        defaults = cls()
        compiler_path = section.get("compilerPath")
        max_problems = section.get("maxNumberOfProblems")
        auto_parens = section.get("enableAutoParentheses")

        return cls(
            compiler_path=compiler_path
            if isinstance(compiler_path, str) and compiler_path
            else defaults.compiler_path,
            max_number_of_problems=max_problems
            if isinstance(max_problems, int) and not isinstance(max_problems, bool)
            and max_problems >= 0
            else defaults.max_number_of_problems,
            enable_auto_parentheses=auto_parens
            if isinstance(auto_parens, bool)
            else defaults.enable_auto_parentheses,
        )

    def resolve(self, environ: Mapping[str, str] | None = None) -> "Settings":
        """Apply environment overrides (``SMALLBASIC_COMPILER``)."""
        env = os.environ if environ is None else environ
        compiler_path = env.get(COMPILER_PATH_ENV)
        if compiler_path:
            return replace(self, compiler_path=compiler_path)
        return self
