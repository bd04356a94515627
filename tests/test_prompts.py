"""Unit tests for prompt loading."""
import pytest

from glance.prompts import clear_cache, get_demo_instructions, get_system_prompt, load_prompt


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_cache()
    yield
    clear_cache()


class TestLoadPrompt:
    """Tests for load_prompt."""

    def test_packaged_prompts(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert get_system_prompt()
        assert "OPENAI_API_KEY" in get_demo_instructions()
        assert not get_system_prompt().endswith("\n")

    def test_working_directory_override(self, tmp_path, monkeypatch):
        """Test that ./prompts/system.txt replaces the packaged prompt."""
        (tmp_path / "prompts").mkdir()
        (tmp_path / "prompts" / "system.txt").write_text("Be terse.\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert get_system_prompt() == "Be terse."

    def test_missing_prompt(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(FileNotFoundError):
            load_prompt("does-not-exist")
