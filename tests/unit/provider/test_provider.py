"""Tests for the dired buffer controller.

Drives ``DiredProvider`` through an in-memory ``BufferView`` against real
temporary directories.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazydired.dired_model import IDResolver, decode_line
from lazydired.editor import BufferView
from lazydired.messages import ERROR, INFO, WARNING, MessageChannel
from lazydired.provider import FIXED_URI, DiredProvider


def body_names(view: BufferView) -> list[str]:
    lines = view.lines()
    return [decode_line(lines[0][:-1], line).bare_name for line in lines[1:]]


class ProviderTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "a.txt").write_text("a\n", encoding="utf-8")
        (self.root / ".hidden").write_text("h\n", encoding="utf-8")
        (self.root / "src").mkdir()
        (self.root / "src" / "main.py").write_text("print()\n", encoding="utf-8")
        self.view = BufferView()
        self.messages = MessageChannel()
        self.opened: list[Path] = []
        self.notified: list[str] = []
        self.provider = DiredProvider(
            self.view,
            self.messages,
            show_dot_files=True,
            open_file=self._open_file,
            resolver=IDResolver(lookup_user=lambda uid: "owner", lookup_group=lambda gid: "group"),
        )
        self.provider.subscribe(self.notified.append)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _open_file(self, path: Path) -> str | None:
        self.opened.append(path)
        return None

    def open_root(self) -> None:
        self.provider.open_dir(str(self.root))

    def move_to(self, name: str) -> None:
        self.view.set_cursor_line(1 + body_names(self.view).index(name))


class OpenAndReloadTests(ProviderTestCase):
    def test_open_dir_renders_header_and_body(self) -> None:
        self.open_root()

        lines = self.view.lines()
        self.assertEqual(lines[0], f"{self.root}:")
        self.assertEqual(sorted(body_names(self.view)), [".hidden", "a.txt", "src"])
        self.assertEqual(self.view.cursor_line(), 1)
        self.assertEqual(self.notified, [f"dired://{self.root}"])
        self.assertEqual(self.provider.dirname, str(self.root))

    def test_render_joins_lines(self) -> None:
        self.open_root()

        self.assertEqual(self.provider.render(), "\n".join(self.view.lines()))
        self.assertEqual(self.provider.provide_content(self.provider.uri), self.provider.render())

    def test_uri_without_buffer_is_fixed_window(self) -> None:
        self.assertEqual(self.provider.uri, FIXED_URI)
        self.provider.reload()
        self.assertEqual(self.notified, [])

    def test_toggle_dot_files_hides_hidden_entries(self) -> None:
        self.open_root()

        self.assertFalse(self.provider.toggle_dot_files())
        self.assertEqual(sorted(body_names(self.view)), ["a.txt", "src"])
        self.assertTrue(self.provider.toggle_dot_files())
        self.assertIn(".hidden", body_names(self.view))

    def test_missing_directory_degrades_to_header_with_error(self) -> None:
        missing = self.root / "gone"

        self.provider.open_dir(str(missing))

        self.assertEqual(self.view.lines(), [f"{missing}:"])
        self.assertEqual(self.messages.latest().level, ERROR)
        self.assertIn(str(missing), self.messages.latest().text)

    def test_unstatable_entry_is_reported_as_warning(self) -> None:
        (self.root / "dangling").symlink_to(self.root / "nowhere")

        self.open_root()

        self.assertNotIn("dangling", body_names(self.view))
        warnings = [message for message in self.messages.messages if message.level == WARNING]
        self.assertEqual(len(warnings), 1)
        self.assertIn("dangling", warnings[0].text)


class NavigationTests(ProviderTestCase):
    def test_enter_directory_opens_it(self) -> None:
        self.open_root()
        self.move_to("src")

        self.provider.enter()

        self.assertEqual(self.provider.dirname, str(self.root / "src"))
        self.assertEqual(body_names(self.view), ["main.py"])

    def test_enter_file_uses_file_opener(self) -> None:
        self.open_root()
        self.move_to("a.txt")

        self.provider.enter()

        self.assertEqual(self.opened, [self.root / "a.txt"])
        self.assertEqual(self.provider.dirname, str(self.root))

    def test_enter_on_header_does_nothing(self) -> None:
        self.open_root()
        self.view.set_cursor_line(0)

        self.provider.enter()

        self.assertEqual(self.opened, [])
        self.assertEqual(self.provider.dirname, str(self.root))

    def test_go_up_dir_focuses_directory_just_left(self) -> None:
        self.provider.open_dir(str(self.root / "src"))

        self.provider.go_up_dir()

        self.assertEqual(self.provider.dirname, str(self.root))
        self.assertEqual(self.provider.current_item().bare_name, "src")

    def test_go_up_dir_stops_at_filesystem_root(self) -> None:
        self.view.replace_lines(["/:"])

        self.provider.go_up_dir()

        self.assertEqual(self.view.lines(), ["/:"])
        self.assertEqual(self.notified, [])


class SelectionTests(ProviderTestCase):
    def test_select_on_header_marks_everything(self) -> None:
        self.open_root()
        self.view.set_cursor_line(0)

        self.provider.select()

        self.assertEqual(len(self.provider.selected_items()), 3)
        self.assertEqual(self.view.cursor_line(), 0)

    def test_select_on_body_line_marks_it_and_moves_down(self) -> None:
        self.open_root()
        self.view.set_cursor_line(1)

        self.provider.select()

        self.assertEqual(len(self.provider.selected_items()), 1)
        self.assertEqual(self.view.cursor_line(), 2)

    def test_unselect_over_range(self) -> None:
        self.open_root()
        self.view.set_cursor_line(0)
        self.provider.select()
        self.view.set_cursor_line(1)
        self.view.toggle_anchor()
        self.view.set_cursor_line(2)

        self.provider.unselect()

        self.assertEqual(len(self.provider.selected_items()), 1)
        self.assertEqual(self.view.cursor_line(), 2)

    def test_corrupted_line_is_reported_and_other_lines_are_marked(self) -> None:
        self.open_root()
        lines = self.view.lines()
        lines[2] = "edited by hand"
        self.view.replace_lines(lines)
        self.view.set_cursor_line(0)

        self.provider.select()

        updated = self.view.lines()
        self.assertEqual(updated[2], "edited by hand")
        self.assertEqual(len(self.provider.selected_items()), 2)
        self.assertEqual(self.messages.latest().level, ERROR)
        self.assertTrue(self.messages.latest().text.startswith("Cannot parse line 3: "))

    def test_large_file_does_not_block_select_all(self) -> None:
        big = self.root / "big.bin"
        with big.open("wb") as handle:
            handle.truncate(123_456_789)
        self.open_root()
        self.view.set_cursor_line(0)

        self.provider.select()

        names = sorted(item.bare_name for item in self.provider.selected_items())
        self.assertEqual(names, [".hidden", "a.txt", "src"])
        self.assertEqual(self.messages.latest().level, ERROR)


class FileOperationTests(ProviderTestCase):
    def test_create_dir_adds_entry(self) -> None:
        self.open_root()

        self.provider.create_dir("build")

        self.assertTrue((self.root / "build").is_dir())
        self.assertIn("build", body_names(self.view))

    def test_create_dir_failure_is_reported(self) -> None:
        self.open_root()

        self.provider.create_dir("src")

        self.assertEqual(self.messages.latest().level, ERROR)

    def test_create_file_creates_and_opens(self) -> None:
        self.open_root()

        self.provider.create_file("new.md")

        self.assertTrue((self.root / "new.md").is_file())
        self.assertIn("new.md", body_names(self.view))
        self.assertEqual(self.opened, [self.root / "new.md"])

    def test_delete_removes_file_under_cursor(self) -> None:
        self.open_root()
        self.move_to("a.txt")

        self.assertTrue(self.provider.delete())

        self.assertFalse((self.root / "a.txt").exists())
        self.assertNotIn("a.txt", body_names(self.view))
        self.assertEqual(self.messages.latest(), self.messages.messages[-1])
        self.assertEqual(self.messages.latest().level, INFO)
        self.assertTrue(self.messages.latest().text.endswith("was deleted"))

    def test_delete_directory_is_reported_not_raised(self) -> None:
        self.open_root()
        self.move_to("src")

        self.assertFalse(self.provider.delete())

        self.assertTrue((self.root / "src").is_dir())
        self.assertEqual(self.messages.latest().level, ERROR)

    def test_rename_and_copy_report_target_without_touching_files(self) -> None:
        self.open_root()
        self.move_to("a.txt")

        renamed = self.provider.rename("b.txt")
        copied = self.provider.copy("c.txt")

        self.assertEqual(renamed, str(self.root / "b.txt"))
        self.assertEqual(copied, str(self.root / "c.txt"))
        self.assertTrue((self.root / "a.txt").exists())
        self.assertFalse((self.root / "b.txt").exists())
        self.assertEqual(self.messages.latest().text, f"a.txt is copied to {self.root / 'c.txt'}")


if __name__ == "__main__":
    unittest.main()
