"""Тесты разрешения виртуальных путей."""

from pathlib import Path

import pytest

from file_gateway.paths import PathOutsideRootError, is_root, resolve_virtual_path


class TestResolveVirtualPath:
    """Тесты для resolve_virtual_path."""

    def test_file_under_root(self, test_files_dir):
        resolved = resolve_virtual_path(test_files_dir, "subdir/nested.txt")
        assert resolved == (test_files_dir / "subdir" / "nested.txt").resolve()

    def test_empty_path_is_root(self, test_files_dir):
        assert resolve_virtual_path(test_files_dir, "") == test_files_dir.resolve()

    def test_leading_slash_stays_under_root(self, test_files_dir):
        resolved = resolve_virtual_path(test_files_dir, "/etc/passwd")
        assert resolved == (test_files_dir / "etc" / "passwd").resolve()

    def test_dotdot_inside_root(self, test_files_dir):
        resolved = resolve_virtual_path(test_files_dir, "subdir/../test1.txt")
        assert resolved == (test_files_dir / "test1.txt").resolve()

    @pytest.mark.parametrize(
        "virtual_path",
        ["..", "../outside.txt", "subdir/../../outside.txt", "/../outside.txt"],
    )
    def test_traversal(self, test_files_dir, virtual_path):
        with pytest.raises(PathOutsideRootError):
            resolve_virtual_path(test_files_dir, virtual_path)

    def test_sibling_with_common_prefix(self, test_files_dir):
        """Соседняя директория с тем же префиксом имени считается внешней."""
        sibling = test_files_dir.parent / (test_files_dir.name + "-other")
        sibling.mkdir()

        with pytest.raises(PathOutsideRootError):
            resolve_virtual_path(test_files_dir, f"../{sibling.name}")

    def test_symlink_outside_root(self, test_files_dir):
        (test_files_dir / "escape").symlink_to(test_files_dir.parent)

        with pytest.raises(PathOutsideRootError):
            resolve_virtual_path(test_files_dir, "escape/outside.txt")

    def test_symlink_not_followed(self, test_files_dir):
        link = test_files_dir / "escape"
        link.symlink_to(test_files_dir.parent / "outside.txt")

        resolved = resolve_virtual_path(test_files_dir, "escape", follow_symlinks=False)
        assert resolved == test_files_dir.resolve() / "escape"

    def test_dotdot_not_followed_still_checked(self, test_files_dir):
        with pytest.raises(PathOutsideRootError):
            resolve_virtual_path(test_files_dir, "..", follow_symlinks=False)

    def test_null_byte(self, test_files_dir):
        with pytest.raises(PathOutsideRootError):
            resolve_virtual_path(test_files_dir, "bad\x00name")

    def test_relative_root(self, test_files_dir, monkeypatch):
        monkeypatch.chdir(test_files_dir)

        assert resolve_virtual_path(Path("."), "test1.txt") == (
            test_files_dir / "test1.txt"
        ).resolve()
        with pytest.raises(PathOutsideRootError):
            resolve_virtual_path(Path("."), "..")


class TestIsRoot:
    """Тесты для is_root."""

    def test_root(self, test_files_dir):
        assert is_root(test_files_dir, test_files_dir.resolve())

    def test_child(self, test_files_dir):
        assert not is_root(test_files_dir, (test_files_dir / "subdir").resolve())
