from __future__ import annotations

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from callbot import launcher
from callbot.tui.config import load_catalog, parse_catalog, resolve_config_path
from callbot.tui.models import LoadError, SelectKind, TextKind
from callbot.tui.state import new_launcher_state

HEADER = """
[app]
title = "CALLBOT"
subtitle = "tests"
"""

VALID = HEADER + """
[[columns]]
id = "project"
title = "Project"

[[columns.actions]]
label = "Deploy"
template = "deploy --env={{env}} --tag={{tag}}"
description = "Roll out a build"

[[columns.actions.parameters]]
name = "env"
placeholder = "{{env}}"
param_type = "select"
required = true
default = "prod"
options = [{ value = "qlf", label = "QLF" }, { value = "prod", label = "Prod" }]

[[columns.actions.parameters]]
name = "tag"
placeholder = "{{tag}}"
default = "latest"

[[columns]]
id = "tools"
title = "Tools"

[[columns.actions]]
label = "Disk usage"
template = "df -h"
"""


class ParseCatalogTests(unittest.TestCase):
    def test_valid_document(self) -> None:
        catalog = parse_catalog(VALID)
        self.assertEqual(catalog.app.title, "CALLBOT")
        self.assertEqual([c.id for c in catalog.columns], ["project", "tools"])
        self.assertEqual(catalog.action_count, 2)

        deploy = catalog.columns[0].actions[0]
        self.assertEqual(deploy.description, "Roll out a build")
        env, tag = deploy.parameters
        self.assertIsInstance(env.kind, SelectKind)
        self.assertTrue(env.required)
        self.assertEqual([o.value for o in env.options], ["qlf", "prod"])
        self.assertIsInstance(tag.kind, TextKind)
        self.assertFalse(tag.required)
        self.assertIsNone(tag.description)
        self.assertEqual(catalog.columns[1].actions[0].parameters, ())

    def test_select_default_picks_matching_option(self) -> None:
        state = new_launcher_state(parse_catalog(VALID))
        self.assertEqual(state.preview, "deploy --env=prod --tag=latest")

    def test_select_default_without_match_falls_back_to_first_option(self) -> None:
        state = new_launcher_state(parse_catalog(VALID.replace('default = "prod"', 'default = "nope"')))
        self.assertEqual(state.preview, "deploy --env=qlf --tag=latest")

    def test_column_without_actions_is_rejected(self) -> None:
        doc = HEADER + '\n[[columns]]\nid = "empty"\ntitle = "Empty"\n'
        with self.assertRaises(LoadError) as ctx:
            parse_catalog(doc)
        self.assertEqual(str(ctx.exception), "Column 'empty' must have at least one action")

    def test_select_without_options_is_rejected(self) -> None:
        doc = HEADER + """
[[columns]]
id = "project"
title = "Project"

[[columns.actions]]
label = "Deploy"
template = "deploy {{env}}"

[[columns.actions.parameters]]
name = "env"
placeholder = "{{env}}"
param_type = "select"
"""
        with self.assertRaises(LoadError) as ctx:
            parse_catalog(doc)
        self.assertEqual(
            str(ctx.exception),
            "Parameter 'env' in action 'Deploy' is type 'select' but has no options",
        )

    def test_validation_messages_name_the_offender(self) -> None:
        cases = {
            HEADER: "Configuration must have at least one column",
            HEADER + '[[columns]]\nid = ""\ntitle = "X"\n': "Column id cannot be empty",
            HEADER + '[[columns]]\nid = "c"\n': "Column 'c' must have a title",
            HEADER
            + '[[columns]]\nid = "c"\ntitle = "C"\n[[columns.actions]]\ntemplate = "ls"\n': "Action in column 'c' must have a label",
            HEADER
            + '[[columns]]\nid = "c"\ntitle = "C"\n[[columns.actions]]\nlabel = "L"\n': "Action 'L' in column 'c' must have a template",
            HEADER
            + '[[columns]]\nid = "c"\ntitle = "C"\n[[columns.actions]]\nlabel = "L"\ntemplate = "ls"\n'
            + '[[columns.actions.parameters]]\nplaceholder = "{{p}}"\n': "Parameter in action 'L' must have a name",
            HEADER
            + '[[columns]]\nid = "c"\ntitle = "C"\n[[columns.actions]]\nlabel = "L"\ntemplate = "ls"\n'
            + '[[columns.actions.parameters]]\nname = "p"\n': "Parameter 'p' in action 'L' must have a placeholder",
        }
        for doc, message in cases.items():
            with self.subTest(message=message):
                with self.assertRaises(LoadError) as ctx:
                    parse_catalog(doc)
                self.assertEqual(str(ctx.exception), message)

    def test_duplicate_column_id_is_rejected(self) -> None:
        doc = VALID.replace('id = "tools"', 'id = "project"')
        with self.assertRaises(LoadError) as ctx:
            parse_catalog(doc)
        self.assertIn("Duplicate column id 'project'", str(ctx.exception))

    def test_type_errors_are_reported(self) -> None:
        with self.assertRaises(LoadError) as ctx:
            parse_catalog(VALID.replace("required = true", 'required = "yes"'))
        self.assertIn("required' must be a boolean", str(ctx.exception))

        with self.assertRaises(LoadError) as ctx:
            parse_catalog(VALID.replace('param_type = "select"', 'param_type = "multi"'))
        self.assertIn("must be 'text' or 'select'", str(ctx.exception))

        with self.assertRaises(LoadError) as ctx:
            parse_catalog('[[columns]]\nid = "c"\n')
        self.assertIn("Missing table 'app'", str(ctx.exception))

    def test_parse_failure(self) -> None:
        with self.assertRaises(LoadError) as ctx:
            parse_catalog("[app\ntitle = ")
        self.assertTrue(str(ctx.exception).startswith("Failed to parse config file"))


class LoadCatalogTests(unittest.TestCase):
    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.toml"
            path.write_text(VALID, encoding="utf-8")
            catalog = load_catalog(path)
            self.assertEqual(catalog.source, path)

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "absent.toml"
            with self.assertRaises(LoadError) as ctx:
                load_catalog(path)
            self.assertTrue(str(ctx.exception).startswith(f"Configuration file not found: {path}"))
            self.assertEqual(ctx.exception.path, path)

    def test_validation_error_carries_path(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.toml"
            path.write_text(HEADER, encoding="utf-8")
            with self.assertRaises(LoadError) as ctx:
                load_catalog(path)
            self.assertEqual(ctx.exception.path, path)


class ResolvePathTests(unittest.TestCase):
    def test_explicit_path_wins(self) -> None:
        with mock.patch.dict(os.environ, {"CALLBOT_CONFIG": "/elsewhere.toml"}):
            self.assertEqual(resolve_config_path("/tmp/mine.toml"), Path("/tmp/mine.toml"))

    def test_environment_variable(self) -> None:
        with mock.patch.dict(os.environ, {"CALLBOT_CONFIG": "/nowhere/callbot.toml"}):
            self.assertEqual(resolve_config_path(None), Path("/nowhere/callbot.toml"))

    def test_working_directory_candidate(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cwd = Path(td)
            (cwd / "config.toml").write_text(VALID, encoding="utf-8")
            env = {k: v for k, v in os.environ.items() if k != "CALLBOT_CONFIG"}
            with mock.patch.dict(os.environ, env, clear=True), mock.patch(
                "callbot.tui.config.Path.cwd", return_value=cwd
            ):
                self.assertEqual(resolve_config_path(None), cwd / "config.toml")


class CheckCommandTests(unittest.TestCase):
    def _main(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = launcher.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_check_valid_catalog(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.toml"
            path.write_text(VALID, encoding="utf-8")
            code, out, _ = self._main("--config", str(path), "--check")
        self.assertEqual(code, 0)
        self.assertIn("OK: 2 columns, 2 actions", out)

    def test_load_error_exits_non_zero(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.toml"
            path.write_text(HEADER + '\n[[columns]]\nid = "empty"\ntitle = "Empty"\n', encoding="utf-8")
            with mock.patch.object(launcher, "new_launcher_state") as new_state:
                code, _, err = self._main("--config", str(path))
        self.assertEqual(code, 1)
        self.assertIn("Column 'empty' must have at least one action", err)
        new_state.assert_not_called()


if __name__ == "__main__":
    unittest.main()
