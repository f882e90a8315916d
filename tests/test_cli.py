"""Tests for the addin-scaffold command line entry point."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from addin_scaffold.cli import build_parser, load_config, main
from addin_scaffold.config import ZERO_GUID, GeneratorConfig


pytestmark = pytest.mark.unit


class TestParser:
    def test_defaults(self):
        args = build_parser(GeneratorConfig()).parse_args([])
        assert args.name == "My Office Add-in"
        assert args.root_path == "current folder"
        assert args.tech == "html"
        assert args.outlook_form == "mail-read,mail-compose,appointment-read,appointment-compose"
        assert args.app_id == ZERO_GUID
        assert args.start_page is None
        assert args.skip_install is False
        assert args.output == "."
        assert args.config is None
        assert args.save_config is None

    def test_unknown_technology_rejected(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser(GeneratorConfig()).parse_args(["--tech", "react"])
        assert exc_info.value.code == 2


class TestMain:
    def test_generates_project(self, tmp_project_dir, capsys):
        main([
            "--name", "Contoso Mail",
            "--tech", "ng",
            "--outlook-form", "mail-read, appointment-read",
            "--skip-install",
            "-o", str(tmp_project_dir),
        ])
        assert (tmp_project_dir / "manifest-contoso-mail.xml").is_file()
        assert (tmp_project_dir / "appread/index.html").is_file()
        assert not (tmp_project_dir / "appcompose").exists()
        package = json.loads((tmp_project_dir / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "contoso-mail"
        assert "Add-in generated" in capsys.readouterr().out

    def test_adal_uses_default_client_id(self, tmp_project_dir):
        main(["--tech", "ng-adal", "--outlook-form", "mail-read", "--skip-install",
              "-o", str(tmp_project_dir)])
        config_js = (tmp_project_dir / "appread/app.config.js").read_text(encoding="utf-8")
        assert ZERO_GUID in config_js

    def test_runs_installer(self, tmp_project_dir):
        mock_run = AsyncMock(return_value=(0, "", ""))
        with patch("addin_scaffold.scaffolder.generator.run_command", mock_run):
            main(["--outlook-form", "mail-read", "-o", str(tmp_project_dir)])
        mock_run.assert_awaited_once()
        assert mock_run.await_args.kwargs["cwd"] == tmp_project_dir

    def test_manifest_only_without_start_page_fails(self, tmp_project_dir, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--tech", "manifest-only", "-o", str(tmp_project_dir)])
        assert exc_info.value.code == 1
        assert "start URL" in capsys.readouterr().out
        assert list(tmp_project_dir.iterdir()) == []

    def test_unknown_form_fails(self, tmp_project_dir):
        with pytest.raises(SystemExit) as exc_info:
            main(["--outlook-form", "task-read", "--skip-install", "-o", str(tmp_project_dir)])
        assert exc_info.value.code == 1

    def test_unparseable_bower_json_fails(self, tmp_project_dir, capsys):
        (tmp_project_dir / "bower.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main(["--outlook-form", "mail-read", "--skip-install", "-o", str(tmp_project_dir)])
        assert exc_info.value.code == 1
        assert "bower.json" in capsys.readouterr().out
        assert (tmp_project_dir / "bower.json").read_text(encoding="utf-8") == "[1, 2]"


class TestConfigFile:
    def test_load_config_defaults_to_environment(self):
        with patch.dict("os.environ", {"ADDIN_INSTALL_TIMEOUT": "90"}, clear=True):
            assert load_config(["--tech", "ng"]).install_timeout == 90

    def test_settings_read_from_file(self, tmp_path, tmp_project_dir):
        path = GeneratorConfig(dev_server_url="https://dev.contoso.com").save(
            tmp_path / "addin.json"
        )
        main(["--config", str(path), "--outlook-form", "mail-read", "--skip-install",
              "-o", str(tmp_project_dir)])
        manifest = (tmp_project_dir / "manifest-my-office-add-in.xml").read_text(encoding="utf-8")
        assert "https://dev.contoso.com/appread/home/home.html" in manifest

    def test_save_config(self, tmp_path, tmp_project_dir):
        target = tmp_path / "saved" / "addin.json"
        with patch.dict("os.environ", {"ADDIN_INSTALL_TIMEOUT": "90"}, clear=True):
            main(["--save-config", str(target), "--outlook-form", "mail-read",
                  "--skip-install", "-o", str(tmp_project_dir)])
        assert GeneratorConfig.load(target).install_timeout == 90

    def test_missing_config_file_fails(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "absent.json")])
        assert exc_info.value.code == 1
        assert "absent.json" in capsys.readouterr().out

    def test_invalid_config_file_fails(self, tmp_path):
        path = tmp_path / "addin.json"
        path.write_text('{"install_timeout": 5}', encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(path)])
        assert exc_info.value.code == 1
