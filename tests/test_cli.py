from pathlib import Path

import yaml
from click.testing import CliRunner

from postshelf.cli import cli


def create_project(root: Path) -> Path:
    posts = root / "posts"
    posts.mkdir(parents=True)
    (posts / "hello.md").write_text("# Hello\n\nBody text", encoding="utf-8")
    (posts / "world.md").write_text("not a title", encoding="utf-8")
    (posts / "second.md").write_text("# Second\n\n## Part\n\nMore", encoding="utf-8")
    (root / "postshelf.yaml").write_text(
        "posts:\n  - hello 2020-01-01\n  - world\n  - second 2021-02-02\n",
        encoding="utf-8",
    )
    return root


def mock_confirm(answer):
    def confirm(*args, **kwargs):
        class MockQuestion:
            def ask(self):
                return answer

        return MockQuestion()

    return confirm


def test_list_newest_first(tmp_path):
    create_project(tmp_path)
    result = CliRunner().invoke(cli, ["--root", str(tmp_path), "list"])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines == ["2021-02-02  second  Second", "2020-01-01  hello  Hello"]


def test_list_uses_cwd_by_default(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["list"])
    assert result.exit_code == 0
    assert "hello" in result.output


def test_list_and_latest_without_posts(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["--root", str(tmp_path), "list"])
    assert result.exit_code == 0
    assert "No posts." in result.output
    result = runner.invoke(cli, ["--root", str(tmp_path), "latest"])
    assert result.exit_code == 0
    assert "No posts." in result.output


def test_latest(tmp_path):
    create_project(tmp_path)
    result = CliRunner().invoke(cli, ["--root", str(tmp_path), "latest"])
    assert result.exit_code == 0
    assert "Second" in result.output
    assert "2021-02-02" in result.output
    assert "## Part" in result.output


def test_show_markdown_and_html(tmp_path):
    create_project(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["--root", str(tmp_path), "show", "hello"])
    assert result.exit_code == 0
    assert result.output == "# Hello\n\nBody text\n"

    result = runner.invoke(cli, ["--root", str(tmp_path), "show", "second", "--html"])
    assert result.exit_code == 0
    assert '<h2 id="part">Part</h2>' in result.output


def test_show_unknown_slug(tmp_path):
    create_project(tmp_path)
    result = CliRunner().invoke(cli, ["--root", str(tmp_path), "show", "world"])
    assert result.exit_code == 1
    assert "No post with slug 'world'" in result.output


def test_missing_post_file_is_reported(tmp_path):
    create_project(tmp_path)
    (tmp_path / "posts" / "hello.md").unlink()
    result = CliRunner().invoke(cli, ["--root", str(tmp_path), "list"])
    assert result.exit_code == 1
    assert "I/O error" in result.output


def test_invalid_config_is_reported(tmp_path):
    (tmp_path / "postshelf.yaml").write_text("posts: nope\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--root", str(tmp_path), "list"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_new_with_explicit_date(tmp_path):
    create_project(tmp_path)
    result = CliRunner().invoke(
        cli, ["--root", str(tmp_path), "new", "My New Post", "--date", "2024-05-05"]
    )
    assert result.exit_code == 0, result.output
    target = tmp_path / "posts" / "my-new-post.md"
    assert target.read_text(encoding="utf-8") == "# My New Post\n\n"
    data = yaml.safe_load((tmp_path / "postshelf.yaml").read_text(encoding="utf-8"))
    assert data["posts"][-1] == "my-new-post 2024-05-05"

    result = CliRunner().invoke(cli, ["--root", str(tmp_path), "latest"])
    assert "My New Post" in result.output


def test_new_prompts_for_date(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.setattr("postshelf.cli.questionary.confirm", mock_confirm(True))
    monkeypatch.setattr("postshelf.cli.today", lambda: "2030-01-01")
    result = CliRunner().invoke(
        cli, ["--root", str(tmp_path), "new", "prompted"], catch_exceptions=False
    )
    assert result.exit_code == 0
    data = yaml.safe_load((tmp_path / "postshelf.yaml").read_text(encoding="utf-8"))
    assert data["posts"][-1] == "prompted 2030-01-01"


def test_new_undated_and_declined_prompt(tmp_path, monkeypatch):
    create_project(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["--root", str(tmp_path), "new", "plain", "--undated"])
    assert result.exit_code == 0

    monkeypatch.setattr("postshelf.cli.questionary.confirm", mock_confirm(False))
    result = runner.invoke(cli, ["--root", str(tmp_path), "new", "declined"])
    assert result.exit_code == 0

    data = yaml.safe_load((tmp_path / "postshelf.yaml").read_text(encoding="utf-8"))
    assert data["posts"][-2:] == ["plain", "declined"]


def test_new_prompt_cancelled(tmp_path, monkeypatch):
    create_project(tmp_path)
    monkeypatch.setattr("postshelf.cli.questionary.confirm", mock_confirm(None))
    result = CliRunner().invoke(cli, ["--root", str(tmp_path), "new", "cancelled"])
    assert result.exit_code != 0
    assert not (tmp_path / "posts" / "cancelled.md").exists()


def test_new_rejects_duplicates(tmp_path):
    create_project(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["--root", str(tmp_path), "new", "hello", "--today"])
    assert result.exit_code == 1
    assert "already listed" in result.output

    (tmp_path / "posts" / "orphan.md").write_text("# Orphan", encoding="utf-8")
    result = runner.invoke(cli, ["--root", str(tmp_path), "new", "orphan", "--today"])
    assert result.exit_code == 1
    assert "File already exists" in result.output


def test_new_rejects_bad_input(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["--root", str(tmp_path), "new", "!!!", "--today"])
    assert result.exit_code == 1
    assert "Cannot derive a slug" in result.output

    result = runner.invoke(
        cli, ["--root", str(tmp_path), "new", "ok", "--date", "two words"]
    )
    assert result.exit_code == 1


def test_version_and_verbose(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "postshelf" in result.output

    create_project(tmp_path)
    result = runner.invoke(cli, ["--root", str(tmp_path), "--verbose", "list"])
    assert result.exit_code == 0


def test_module_main_entrypoint():
    from postshelf.__main__ import main

    assert callable(main)


def test_main_invokes_cli(monkeypatch):
    import postshelf.cli as cli_mod

    called = {}

    def fake_cli():
        called["ran"] = True

    monkeypatch.setattr(cli_mod, "cli", fake_cli)
    cli_mod.main()
    assert called["ran"]


def test_show_with_table_of_contents(tmp_path):
    create_project(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["--root", str(tmp_path), "show", "second", "--toc"])
    assert result.exit_code == 0
    assert result.output == "# Second\n\n- Part\n\n## Part\n\nMore\n"

    result = runner.invoke(
        cli, ["--root", str(tmp_path), "show", "second", "--html", "--toc"]
    )
    assert result.exit_code == 0
    assert result.output.startswith(
        '<nav class="toc"><ul><li><a href="#part">Part</a></li></ul></nav>\n'
    )


def test_new_rejects_conflicting_date_flags(tmp_path):
    create_project(tmp_path)
    runner = CliRunner()
    for flags in (
        ["--today", "--undated"],
        ["--date", "2024-01-01", "--today"],
        ["--date", "2024-01-01", "--undated"],
    ):
        result = runner.invoke(cli, ["--root", str(tmp_path), "new", "clash", *flags])
        assert result.exit_code == 1
        assert "only one of" in result.output
    assert not (tmp_path / "posts" / "clash.md").exists()


def test_new_keeps_non_mapping_config_intact(tmp_path):
    (tmp_path / "posts").mkdir()
    config = tmp_path / "postshelf.yaml"
    original = "- hello 2020-01-01\n- world\n"
    config.write_text(original, encoding="utf-8")

    result = CliRunner().invoke(
        cli, ["--root", str(tmp_path), "new", "fresh", "--undated"]
    )
    assert result.exit_code == 1
    assert "refusing to overwrite" in result.output
    assert config.read_text(encoding="utf-8") == original
    # The scaffolded file is removed so a retry is not blocked
    assert not (tmp_path / "posts" / "fresh.md").exists()


def test_new_removes_post_file_when_config_write_fails(tmp_path, monkeypatch):
    create_project(tmp_path)

    def failing_save(project_root, entries):
        raise PermissionError("read-only postshelf.yaml")

    monkeypatch.setattr("postshelf.cli.save_entries", failing_save)
    result = CliRunner().invoke(
        cli, ["--root", str(tmp_path), "new", "retry-me", "--today"]
    )
    assert result.exit_code == 1
    assert "read-only" in result.output
    assert not (tmp_path / "posts" / "retry-me.md").exists()
