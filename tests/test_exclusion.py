"""Tests for exclusion rules."""

from backbrace.models import FileEntry
from backbrace.sync.exclusion import ExclusionFilter, ExclusionRules


class TestExclusionRules:
    """Tests for merging and matching patterns."""

    def test_defaults_only(self):
        assert ExclusionRules.from_patterns().patterns == (".DS_Store",)
        assert ExclusionRules.from_patterns([]).patterns == (".DS_Store",)

    def test_user_patterns_follow_defaults(self):
        rules = ExclusionRules.from_patterns(["cache", ".git"])
        assert rules.patterns == (".DS_Store", "cache", ".git")

    def test_patterns_are_deduplicated(self):
        rules = ExclusionRules.from_patterns(["cache", ".DS_Store", "cache", ""])
        assert rules.patterns == (".DS_Store", "cache")

    def test_match_anywhere_in_path(self):
        rules = ExclusionRules.from_patterns(["build"])
        assert rules.match("build/out.o") == "build"
        assert rules.match("src/rebuild.sh") == "build"
        assert rules.match("photos/.DS_Store") == ".DS_Store"
        assert rules.match("src/main.py") is None

    def test_match_is_case_sensitive(self):
        rules = ExclusionRules.from_patterns(["Cache"])
        assert rules.match("cache/x") is None


class TestExclusionFilter:
    """Tests for counting excluded entries."""

    def test_excluded_entry(self):
        exclusions = ExclusionFilter(ExclusionRules.from_patterns(["tmp"]))

        assert exclusions.is_excluded(FileEntry("tmp/a.txt")) is True
        assert exclusions.excluded_count == 1

    def test_included_entry(self):
        exclusions = ExclusionFilter(ExclusionRules.from_patterns(["tmp"]))

        assert exclusions.is_excluded(FileEntry("src/a.txt")) is False
        assert exclusions.excluded_count == 0

    def test_repeated_checks_count_once(self):
        exclusions = ExclusionFilter(ExclusionRules.from_patterns())
        entry = FileEntry(".DS_Store")

        for _ in range(3):
            assert exclusions.is_excluded(entry)

        assert exclusions.excluded_count == 1

    def test_directories_are_counted(self):
        exclusions = ExclusionFilter(ExclusionRules.from_patterns(["node_modules"]))

        exclusions.is_excluded(FileEntry("node_modules", is_directory=True))
        exclusions.is_excluded(FileEntry("node_modules/pkg/index.js"))

        assert exclusions.excluded_paths == {"node_modules", "node_modules/pkg/index.js"}
