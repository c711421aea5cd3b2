from __future__ import annotations

from bento_menu.paths import (
    first_alnum,
    get_file_name,
    resolve_display_names,
    shorten_home,
    split_path,
)


def test_get_file_name_handles_both_separators() -> None:
    assert get_file_name("a/b/foo.txt") == "foo.txt"
    assert get_file_name("C:\\work\\bar.py") == "bar.py"
    assert get_file_name("plain") == "plain"


def test_get_file_name_degrades_to_raw_string() -> None:
    assert get_file_name("some/dir/") == "some/dir/"
    assert get_file_name("") == ""


def test_split_path_drops_empty_components() -> None:
    assert split_path("/home/al//x.py") == ["home", "al", "x.py"]
    assert split_path("a\\b/c") == ["a", "b", "c"]


def test_first_alnum_skips_punctuation() -> None:
    assert first_alnum("_init.py") == "i"
    assert first_alnum(".9lives") == "9"
    assert first_alnum("__--") is None


def test_shorten_home_matches_whole_components() -> None:
    assert shorten_home("/home/al/x.txt", home="/home/al") == "~/x.txt"
    assert shorten_home("/home/al", home="/home/al") == "~"
    assert shorten_home("/home/alice/x.txt", home="/home/al") == "/home/alice/x.txt"


def test_colliding_pair_gets_parent_and_unique_name_stays_bare() -> None:
    names = resolve_display_names(["a/foo.txt", "b/foo.txt", "bar.txt"])

    assert names == {
        "a/foo.txt": "a/foo.txt",
        "b/foo.txt": "b/foo.txt",
        "bar.txt": "bar.txt",
    }


def test_colliding_names_use_minimal_depth() -> None:
    names = resolve_display_names(["x/a/foo.py", "y/a/foo.py", "z/b/foo.py"])

    assert names["x/a/foo.py"] == "x/a/foo.py"
    assert names["y/a/foo.py"] == "y/a/foo.py"
    assert names["z/b/foo.py"] == "b/foo.py"


def test_shorter_member_falls_back_to_full_path() -> None:
    names = resolve_display_names(["foo.py", "a/foo.py"])

    assert names == {"foo.py": "foo.py", "a/foo.py": "a/foo.py"}


def test_identical_components_fall_back_to_original_strings() -> None:
    names = resolve_display_names(["a/b/x.txt", "a\\b\\x.txt"])

    assert names == {"a/b/x.txt": "a/b/x.txt", "a\\b\\x.txt": "a\\b\\x.txt"}


def test_home_contraction_applies_after_uniqueness() -> None:
    names = resolve_display_names(["/home/al/x.txt", "home/al/x.txt"], home="/home/al")

    assert names["/home/al/x.txt"] == "~/x.txt"
    assert names["home/al/x.txt"] == "home/al/x.txt"


def test_backslash_paths_are_joined_with_slash() -> None:
    names = resolve_display_names(["c:\\p\\foo.txt", "c:\\q\\foo.txt"])

    assert names == {"c:\\p\\foo.txt": "p/foo.txt", "c:\\q\\foo.txt": "q/foo.txt"}


def test_output_is_independent_of_input_order() -> None:
    paths = ["src/a/util.py", "lib/a/util.py", "src/b/util.py", "main.py", "test/main.py"]

    assert resolve_display_names(paths) == resolve_display_names(list(reversed(paths)))


def test_duplicates_collapse_and_empty_input_is_empty() -> None:
    assert resolve_display_names(["a/foo", "a/foo"]) == {"a/foo": "foo"}
    assert resolve_display_names([]) == {}


def test_colliding_names_are_pairwise_distinct() -> None:
    paths = [
        "proj/src/app/views.py",
        "proj/src/admin/views.py",
        "other/src/app/views.py",
        "views.py",
        "x/views.py",
    ]

    names = resolve_display_names(paths, home="/nonexistent")

    assert len(set(names.values())) == len(paths)
    assert names["proj/src/admin/views.py"] == "admin/views.py"
    assert names["proj/src/app/views.py"] == "proj/src/app/views.py"
    assert names["other/src/app/views.py"] == "other/src/app/views.py"
