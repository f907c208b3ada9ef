"""Tests for the CLI entry point."""

import json
from unittest.mock import patch

import pytest

from conftest import write_package
from modern_patch.cli.main import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    build_parser,
    determine_exit_code,
    main,
    options_from_args,
)
from modern_patch.engine.manager_probe import ManagerProbe
from modern_patch.models import PatchResult
from modern_patch.utils.diff_generator import render_placeholder


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MODERN_PATCH_DIR", "MODERN_PATCH_LOG_LEVEL", "MODERN_PATCH_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def detected(npm_identity):
    with patch.object(ManagerProbe, "detect", return_value=npm_identity) as mock_detect:
        yield mock_detect


def _placeholder_patches(project_root, *file_names):
    patch_dir = project_root / "patches"
    patch_dir.mkdir(exist_ok=True)
    for file_name in file_names:
        (patch_dir / file_name).write_text(render_placeholder("foo", "2.0.0", "manual"))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestBuildParser:
    def test_create_defaults(self):
        args = build_parser().parse_args(["create", "left-pad"])
        assert args.command == "create"
        assert args.package_name == "left-pad"
        assert args.patch_dir is None
        assert args.include == []
        assert args.exclude == []
        assert args.case_sensitive is False
        assert args.append is None

    def test_create_filters(self):
        args = build_parser().parse_args(
            ["create", "foo", "-i", "lib/*", "*.js", "-e", "*.map", "-c", "--append", "fix"]
        )
        options = options_from_args(args)
        assert options.include == ["lib/*", "*.js"]
        assert options.exclude == ["*.map"]
        assert options.case_sensitive is True
        assert options.append == "fix"

    def test_apply_flags(self):
        args = build_parser().parse_args(["apply", "--reverse", "--error-on-fail", "-d", "fixes"])
        options = options_from_args(args)
        assert options.reverse is True
        assert options.error_on_fail is True
        assert options.patch_dir == "fixes"

    def test_no_command(self):
        args = build_parser().parse_args([])
        assert args.command is None
        assert options_from_args(args).reverse is False


class TestDetermineExitCode:
    def test_success(self):
        assert determine_exit_code("apply", PatchResult(success=True), False) == EXIT_SUCCESS

    def test_apply_failure_is_lenient_by_default(self):
        result = PatchResult(errors=["boom"]).finalize()
        assert determine_exit_code("apply", result, False) == EXIT_SUCCESS

    def test_apply_failure_with_error_on_fail(self):
        result = PatchResult(errors=["boom"]).finalize()
        assert determine_exit_code("apply", result, True) == EXIT_FAILURE

    def test_create_failure(self):
        result = PatchResult(errors=["boom"]).finalize()
        assert determine_exit_code("create", result, False) == EXIT_FAILURE


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_invalid_project_root(self, tmp_path, capsys):
        code = main(["--project-root", str(tmp_path / "nope"), "list"])
        assert code == EXIT_FAILURE
        assert "not a valid directory" in capsys.readouterr().err

    def test_list_empty(self, project_root, capsys):
        code = main(["--project-root", str(project_root), "list"])
        assert code == EXIT_SUCCESS
        assert "No patches found" in capsys.readouterr().out

    def test_list_json(self, project_root, capsys):
        _placeholder_patches(project_root, "foo+2.0.0+001+first.patch")
        code = main(["--project-root", str(project_root), "--output-json", "list"])
        assert code == EXIT_SUCCESS
        [entry] = json.loads(capsys.readouterr().out)
        assert entry["dependency_name"] == "foo"
        assert entry["sequence"] == 1
        assert entry["description"] == "first"

    def test_info(self, project_root, detected, capsys):
        _placeholder_patches(project_root, "foo+2.0.0.patch")
        code = main(["--project-root", str(project_root), "info"])
        out = capsys.readouterr().out
        assert code == EXIT_SUCCESS
        assert "Package Manager: npm 10.2.0" in out
        assert "Patches: 1" in out

    def test_default_command_applies(self, project_root, detected, capsys):
        _placeholder_patches(project_root, "foo+2.0.0.patch")
        code = main(["--project-root", str(project_root), "--output-json"])
        payload = json.loads(capsys.readouterr().out)
        assert code == EXIT_SUCCESS
        assert payload["success"] is True
        assert len(payload["patches_skipped"]) == 1
        assert payload["outcomes"][0]["state"] == "skipped-manual"

    def test_apply_failure_exit_codes(self, project_root, detected):
        (project_root / "patches").mkdir()
        (project_root / "patches" / "ghost+1.0.0.patch").write_text(
            "diff --git a/ghost b/ghost\nindex 0000000..0000000 100644\n@@ -1,1 +1,1 @@\n-a\n+b\n"
        )
        assert main(["--project-root", str(project_root), "apply"]) == EXIT_SUCCESS
        assert main(["--project-root", str(project_root), "apply", "--error-on-fail"]) == EXIT_FAILURE

    def test_create_writes_placeholder(self, project_root, detected, capsys):
        write_package(project_root / "node_modules" / "left-pad", "left-pad", "1.3.0")
        with patch("modern_patch.engine.registry_fetcher.run_command") as mock_run:
            mock_run.return_value.success = False
            mock_run.return_value.error = "npm ERR! network"
            code = main(["--project-root", str(project_root), "create", "left-pad"])

        assert code == EXIT_SUCCESS
        assert (project_root / "patches" / "left-pad+1.3.0.patch").is_file()
        assert "Patch created successfully" in capsys.readouterr().out

    def test_patch_dir_from_environment(self, project_root, monkeypatch, capsys):
        monkeypatch.setenv("MODERN_PATCH_DIR", "vendor-patches")
        (project_root / "vendor-patches").mkdir()
        (project_root / "vendor-patches" / "foo+2.0.0.patch").write_text("# patch\n")
        code = main(["--project-root", str(project_root), "list"])
        assert code == EXIT_SUCCESS
        assert "foo@2.0.0" in capsys.readouterr().out

    def test_unexpected_error(self, project_root, capsys):
        with patch("modern_patch.cli.main.dispatch", side_effect=RuntimeError("kaboom")):
            code = main(["--project-root", str(project_root), "list"])
        assert code == EXIT_FAILURE
        assert "Unexpected error: kaboom" in capsys.readouterr().err

    def test_keyboard_interrupt(self, project_root):
        with patch("modern_patch.cli.main.dispatch", side_effect=KeyboardInterrupt):
            assert main(["--project-root", str(project_root), "list"]) == 130
