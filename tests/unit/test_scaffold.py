"""Tests for agent naming and project generation."""

import json
from pathlib import Path

import pytest

from bzp.errors import DirectoryExistsError, ExitCode, TemplateNotFoundError
from bzp.scaffold import (
    DependencyResult,
    ProjectNames,
    choose_package_manager,
    generate_project,
    install_dependencies,
    render_template,
)
from bzp.scaffold.naming import ensure_agent_suffix, get_base_name, to_camel_case, to_pascal_case


class TestNaming:
    """Tests for name normalisation."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("chatbot", "Chatbot"),
            ("my-chat_bot", "MyChatBot"),
            ("support  desk", "SupportDesk"),
            ("--weird--", "Weird"),
        ],
    )
    def test_pascal_case(self, value, expected):
        assert to_pascal_case(value) == expected

    def test_camel_case(self):
        assert to_camel_case("my-chat-bot") == "myChatBot"

    def test_agent_suffix(self):
        assert ensure_agent_suffix("chatbot") == "chatbot-agent"
        assert ensure_agent_suffix("chatbot-agent") == "chatbot-agent"
        assert get_base_name("chatbot-agent") == "chatbot"
        assert get_base_name("chatbot") == "chatbot"

    def test_project_names(self):
        names = ProjectNames.from_agent_name("support-desk")
        assert names.project_name == "support-desk-agent"
        assert names.agent_function == "supportDesk"
        assert names.prompt_name == "supportDeskPrompt"
        assert names.schema_name == "supportDeskSchema"
        assert names.input_type == "SupportDeskRequest"

    def test_suffixed_name_is_not_doubled(self):
        names = ProjectNames.from_agent_name("chatbot-agent")
        assert names.project_name == "chatbot-agent"
        assert names.agent_function == "chatbot"


class TestRenderTemplate:
    """Tests for placeholder substitution."""

    def test_substitutes(self):
        out = render_template("const {{promptName}} = 1;", {"promptName": "botPrompt"})
        assert out == "const botPrompt = 1;"

    def test_unknown_markers_untouched(self):
        assert render_template("{{missing}} {{x}}", {"x": "1"}) == "{{missing}} 1"


class TestGenerateProject:
    """Tests for writing the project tree."""

    def test_writes_files(self, tmp_path: Path):
        names = ProjectNames.from_agent_name("chatbot")
        project_dir = tmp_path / names.project_name

        written = generate_project(names, project_dir)

        assert written == [
            "src/server.ts",
            "src/prompt.ts",
            "src/types.ts",
            "src/ai.ts",
            ".env.example",
            "package.json",
            "tsconfig.json",
            ".gitignore",
            ".env",
        ]
        for rel in written:
            assert (project_dir / rel).is_file()

    def test_placeholders_rendered(self, tmp_path: Path):
        names = ProjectNames.from_agent_name("chatbot")
        project_dir = tmp_path / names.project_name
        generate_project(names, project_dir)

        for rel in ["src/server.ts", "src/prompt.ts", "src/types.ts", "src/ai.ts"]:
            assert "{{" not in (project_dir / rel).read_text()
        assert "chatbotPrompt" in (project_dir / "src/prompt.ts").read_text()
        assert "ChatbotRequest" in (project_dir / "src/types.ts").read_text()

    def test_package_json(self, tmp_path: Path):
        names = ProjectNames.from_agent_name("chatbot")
        project_dir = tmp_path / names.project_name
        generate_project(names, project_dir)

        data = json.loads((project_dir / "package.json").read_text())
        assert data["name"] == "chatbot-agent"
        assert data["scripts"]["dev"] == "tsx watch src/server.ts"
        assert "@ai-sdk/ollama" in data["dependencies"]

    def test_env_copied_from_example(self, tmp_path: Path):
        names = ProjectNames.from_agent_name("chatbot")
        project_dir = tmp_path / names.project_name
        generate_project(names, project_dir)

        assert (project_dir / ".env").read_text() == (project_dir / ".env.example").read_text()

    def test_existing_directory(self, tmp_path: Path):
        names = ProjectNames.from_agent_name("chatbot")
        project_dir = tmp_path / names.project_name
        project_dir.mkdir()
        (project_dir / "keep.txt").write_text("mine")

        with pytest.raises(DirectoryExistsError) as exc_info:
            generate_project(names, project_dir)

        assert exc_info.value.exit_code == ExitCode.SCAFFOLD_ERROR
        assert (project_dir / "keep.txt").read_text() == "mine"

    def test_missing_template_writes_nothing(self, tmp_path: Path):
        names = ProjectNames.from_agent_name("chatbot")
        project_dir = tmp_path / names.project_name
        templates = tmp_path / "templates"
        templates.mkdir()

        with pytest.raises(TemplateNotFoundError):
            generate_project(names, project_dir, templates_dir=templates)

        assert not project_dir.exists()


class TestDependencies:
    """Tests for npm dependency installation."""

    def test_choose_prefers_pnpm(self):
        assert choose_package_manager("auto", lambda name: name == "pnpm") == "pnpm"
        assert choose_package_manager("auto", lambda name: False) == "npm"

    def test_explicit_preference(self):
        assert choose_package_manager("npm", lambda name: True) == "npm"

    @pytest.mark.asyncio
    async def test_install(self, tmp_path: Path, make_runner):
        runner = make_runner()
        result = await install_dependencies(tmp_path, runner, "pnpm")

        assert result.ok
        assert runner.commands("attached") == ["pnpm install"]

    @pytest.mark.asyncio
    async def test_install_failure(self, tmp_path: Path, make_runner):
        from bzp.runtime.types import ProcessResult

        runner = make_runner()
        runner.attached_results["npm install"] = ProcessResult.failed("boom", returncode=1)

        result = await install_dependencies(tmp_path, runner, "npm")

        assert not result.ok
        assert result.error == "boom"

    def test_manual_command(self):
        result = DependencyResult("npm", ok=False)
        assert result.manual_command("chatbot-agent") == "cd chatbot-agent && npm install"
