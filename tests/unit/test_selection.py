# pylint: disable=missing-module-docstring,missing-function-docstring

from catalog.runtime_catalog import RuntimeCatalog
from orchestrator.selection import Selection, reconcile, set_language, set_version


CATALOG = RuntimeCatalog.from_raw(
    [
        {"language": "javascript", "version": "18.15.0"},
        {"language": "javascript", "version": "20.11.1"},
        {"language": "php", "version": "8.2.3"},
    ],
    ("javascript", "php"),
)


# ---------------------------------------------------------------------
# set_language
# ---------------------------------------------------------------------

def test_set_language_resolves_catalog_default_version():
    selection = Selection(language="javascript", version="18.15.0")

    new = set_language(selection, "php", CATALOG)

    assert new == Selection(language="php", version="8.2.3")
    assert new.version == CATALOG.default_for("php").version


def test_set_language_catalog_miss_keeps_previous_version():
    selection = Selection(language="php", version="latest")

    new = set_language(selection, "ruby", CATALOG)

    assert new == Selection(language="ruby", version="latest")


def test_set_language_on_empty_catalog_keeps_version():
    selection = Selection(language="javascript", version="")

    new = set_language(selection, "php", RuntimeCatalog())

    assert new == Selection(language="php", version="")


def test_set_language_does_not_mutate_input():
    selection = Selection(language="javascript", version="custom")

    set_language(selection, "php", CATALOG)

    assert selection == Selection(language="javascript", version="custom")


# ---------------------------------------------------------------------
# set_version
# ---------------------------------------------------------------------

def test_set_version_never_alters_language():
    for version in ("8.2.3", "latest", "", "  not-in-catalog  "):
        new = set_version(Selection(language="php", version="8.2.3"), version)
        assert new.language == "php"
        assert new.version == version


# ---------------------------------------------------------------------
# reconcile (catalog loaded)
# ---------------------------------------------------------------------

def test_reconcile_keeps_offered_language_and_takes_default():
    new = reconcile(Selection(language="php", version=""), CATALOG)

    assert new == Selection(language="php", version="8.2.3")


def test_reconcile_moves_to_first_entry_when_language_not_offered():
    new = reconcile(Selection(language="ruby", version="3.0.1"), CATALOG)

    assert new == Selection(language="javascript", version="18.15.0")


def test_reconcile_with_empty_catalog_is_noop():
    selection = Selection(language="javascript", version="")

    assert reconcile(selection, RuntimeCatalog()) is selection
