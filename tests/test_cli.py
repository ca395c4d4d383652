from __future__ import annotations

import json

import pytest

from blogsite.cli import main


def test_build_succeeds_and_prints_summary(posts_dir, sample_blog, tmp_path, capsys):
    out = tmp_path / "site"
    code = main(["build", "--input", str(posts_dir), "--output", str(out), "--config", str(tmp_path / "none.toml")])
    assert code == 0
    assert (out / "index.html").exists()
    stdout = capsys.readouterr().out
    assert "Built 4 posts (0 skipped)" in stdout


def test_malformed_file_is_skipped_but_build_exits_zero(posts_dir, sample_blog, write_post, tmp_path, capsys):
    write_post("broken.md", "---\ntitle: missing end\n")
    out = tmp_path / "site"
    code = main(["build", "--input", str(posts_dir), "--output", str(out), "--config", str(tmp_path / "none.toml")])
    assert code == 0
    stdout = capsys.readouterr().out
    assert "Built 4 posts (1 skipped)" in stdout
    assert "skipped broken.md: missing closing '---' delimiter" in stdout
    assert not (out / "posts" / "broken.html").exists()


def test_duplicate_slug_aborts_without_output(posts_dir, write_post, tmp_path, capsys):
    write_post("Same Name.md")
    write_post("same-name.md")
    out = tmp_path / "site"
    code = main(["build", "--input", str(posts_dir), "--output", str(out), "--config", str(tmp_path / "none.toml")])
    assert code != 0
    assert not out.exists()
    assert "Build failed: duplicate slug 'same-name'" in capsys.readouterr().err


def test_missing_input_directory_fails(tmp_path, capsys):
    code = main(
        ["build", "--input", str(tmp_path / "nope"), "--output", str(tmp_path / "site"), "--config", str(tmp_path / "none.toml")]
    )
    assert code == 1
    assert "input directory not found" in capsys.readouterr().err


def test_config_file_supplies_defaults(posts_dir, sample_blog, tmp_path):
    config = tmp_path / "site.json"
    out = tmp_path / "from-config"
    config.write_text(
        json.dumps(
            {
                "input": str(posts_dir),
                "output": str(out),
                "site_name": "Config Blog",
                "site_url": "https://blog.example",
            }
        ),
        encoding="utf-8",
    )
    assert main(["build", "--config", str(config)]) == 0
    assert "Config Blog | Home" in (out / "index.html").read_text(encoding="utf-8")
    assert (out / "rss.xml").exists()


def test_command_line_overrides_config(posts_dir, sample_blog, tmp_path):
    config = tmp_path / "site.toml"
    config.write_text('site_name = "From TOML"\n', encoding="utf-8")
    out = tmp_path / "site"
    args = ["build", "--config", str(config), "--input", str(posts_dir), "--output", str(out)]
    assert main(args + ["--site-name", "From Flag"]) == 0
    assert "From Flag | Home" in (out / "index.html").read_text(encoding="utf-8")


def test_invalid_config_is_fatal(tmp_path, capsys):
    config = tmp_path / "site.yaml"
    config.write_text("- just\n- a list\n", encoding="utf-8")
    assert main(["build", "--config", str(config)]) == 1
    assert "config must be a mapping" in capsys.readouterr().err


def test_cache_file_is_written(posts_dir, sample_blog, tmp_path):
    cache = tmp_path / "cache" / "render.json"
    args = ["build", "--input", str(posts_dir), "--output", str(tmp_path / "site"), "--cache-file", str(cache)]
    assert main(args + ["--config", str(tmp_path / "none.toml")]) == 0
    data = json.loads(cache.read_text(encoding="utf-8"))
    assert sorted(data["posts"]) == [
        "kubernetes-basics.md",
        "laravel-rate-limiting.md",
        "sql-injection.md",
        "welcome-to-my-blog.md",
    ]


def test_build_requires_a_command(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_config_option_belongs_to_build(posts_dir, sample_blog, tmp_path):
    config = tmp_path / "site.toml"
    config.write_text('site_name = "From TOML"\n', encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(config), "build", "--input", str(posts_dir), "--output", str(tmp_path / "site")])
    assert excinfo.value.code == 2
    assert not (tmp_path / "site").exists()
