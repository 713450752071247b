import pytest

from clearance.cleaners.base import CacheKind
from clearance.selection import (
    MENU_OPTIONS,
    CleanOptions,
    merge_options,
    options_from_flags,
    parse_selection,
)


class TestParseSelection:
    def test_numbers(self):
        options = parse_selection("1,3,5")
        assert options.kinds == (CacheKind.NPM, CacheKind.DOCKER, CacheKind.WINTEMP)
        assert options.clean_npm
        assert options.clean_docker
        assert options.clean_windows_temp
        assert not options.clean_yarn

    def test_names_and_whitespace(self):
        options = parse_selection(" Yarn , winsxs,WINCHUNKS ")
        assert options.kinds == (CacheKind.YARN, CacheKind.WINSXS, CacheKind.WINCHUNKS)

    def test_duplicates_removed(self):
        assert parse_selection("1,npm,1").kinds == (CacheKind.NPM,)

    def test_all(self):
        options = parse_selection("all")
        assert options.clean_all
        assert options.kinds == tuple(CacheKind)

    @pytest.mark.parametrize("text", ["7", "report"])
    def test_report(self, text):
        options = parse_selection(text)
        assert options.report_size
        assert not options.has_cleanup

    @pytest.mark.parametrize("text", ["8", "exit", "EXIT"])
    def test_exit(self, text):
        assert parse_selection(text).exit_requested

    def test_unknown_tokens_kept(self):
        options = parse_selection("1,42,foo")
        assert options.kinds == (CacheKind.NPM,)
        assert options.unknown == ("42", "foo")

    @pytest.mark.parametrize("text", ["", " , ,", None])
    def test_empty(self, text):
        options = parse_selection(text)
        assert options.is_empty
        assert options.unknown == ()

    def test_measure_sizes_flag(self):
        assert parse_selection("1", measure_sizes=True).measure_sizes


class TestFlags:
    def test_individual_flags_keep_menu_order(self):
        options = options_from_flags(winchunks=True, npm=True)
        assert options.kinds == (CacheKind.NPM, CacheKind.WINCHUNKS)

    def test_all_flag(self):
        assert options_from_flags(clean_all=True).kinds == tuple(CacheKind)

    def test_no_flags(self):
        assert options_from_flags() == CleanOptions()


def test_merge_keeps_first_order():
    merged = merge_options(parse_selection("docker"), options_from_flags(npm=True, report_size=True))
    assert merged.kinds == (CacheKind.DOCKER, CacheKind.NPM)
    assert merged.report_size


def test_menu_has_eight_entries():
    assert [option.key for option in MENU_OPTIONS] == [str(i) for i in range(1, 9)]
