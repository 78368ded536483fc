"""
Unit tests for user settings.
"""

from smallbasic.config import COMPILER_PATH_ENV, DEFAULT_COMPILER_PATH, Settings


class TestFromDict:
    """Reading the editor's configuration section."""

    def test_defaults(self):
        settings = Settings.from_dict(None)
        assert settings.compiler_path == DEFAULT_COMPILER_PATH
        assert settings.max_number_of_problems == 1000
        assert settings.enable_auto_parentheses is True

    def test_section_values(self):
        settings = Settings.from_dict(
            {
                "compilerPath": "/opt/sb/SmallBasicCompiler.exe",
                "maxNumberOfProblems": 5,
                "enableAutoParentheses": False,
            }
        )
        assert settings == Settings(
            compiler_path="/opt/sb/SmallBasicCompiler.exe",
            max_number_of_problems=5,
            enable_auto_parentheses=False,
        )

    def test_wrapped_section(self):
        settings = Settings.from_dict({"smallBasic": {"maxNumberOfProblems": 3}})
        assert settings.max_number_of_problems == 3
        assert settings.compiler_path == DEFAULT_COMPILER_PATH

    def test_wrongly_typed_values_fall_back(self):
        settings = Settings.from_dict(
            {
                "compilerPath": 42,
                "maxNumberOfProblems": True,
                "enableAutoParentheses": "yes",
            }
        )
        assert settings == Settings()

    def test_negative_limit_falls_back(self):
        assert Settings.from_dict({"maxNumberOfProblems": -1}).max_number_of_problems == 1000

    def test_non_mapping_section(self):
        assert Settings.from_dict({"smallBasic": "oops"}) == Settings()


class TestResolve:
    """Environment overrides."""

    def test_environment_overrides_compiler(self):
        settings = Settings().resolve({COMPILER_PATH_ENV: "/tmp/compiler"})
        assert settings.compiler_path == "/tmp/compiler"

    def test_empty_variable_ignored(self):
        settings = Settings(compiler_path="/a").resolve({COMPILER_PATH_ENV: ""})
        assert settings.compiler_path == "/a"

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv(COMPILER_PATH_ENV, "/from/env")
        assert Settings().resolve().compiler_path == "/from/env"

    def test_without_override(self, monkeypatch):
        monkeypatch.delenv(COMPILER_PATH_ENV, raising=False)
        settings = Settings(max_number_of_problems=7)
        assert settings.resolve() == settings
