"""Tests for the diagnostic code catalog."""
from __future__ import annotations

from typing import Any

import pytest

from diagtrack.catalog import (
    DEFAULT_CODES,
    CatalogError,
    CodeCatalog,
    CodeInfo,
    MessageCatalog,
    format_code_detail,
    format_code_table,
)
from diagtrack.constants import Severity


class TestCanonicalIdentifier:
    def test_four_digit_padding(self) -> None:
        catalog: MessageCatalog = MessageCatalog()
        assert catalog.canonical_identifier(1001) == "QS1001"
        assert catalog.canonical_identifier(42) == "QS0042"

    def test_unknown_code_still_has_identifier(self) -> None:
        assert MessageCatalog().canonical_identifier(4242) == "QS4242"


class TestTryResolveCode:
    def test_resolves_prefixed_code(self) -> None:
        assert MessageCatalog().try_resolve_code("QS2001") == 2001

    def test_none(self) -> None:
        assert MessageCatalog().try_resolve_code(None) is None

    @pytest.mark.parametrize("code", [2001, 20.01, ["QS2001"]])
    def test_non_string(self, code: Any) -> None:
        assert MessageCatalog().try_resolve_code(code) is None

    @pytest.mark.parametrize("code", ["", "2001", "QS", "QSx001", "CS2001", "QS20 01"])
    def test_malformed(self, code: str) -> None:
        assert MessageCatalog().try_resolve_code(code) is None


class TestMessageFor:
    def test_fills_placeholders(self) -> None:
        message: str = MessageCatalog().message_for(5001, ["Int", "Double"])
        assert message == "The type Int does not match the type Double."

    def test_missing_args_render_empty(self) -> None:
        assert MessageCatalog().message_for(1001, None) == 'Unexpected token "".'

    def test_extra_args_ignored(self) -> None:
        assert MessageCatalog().message_for(1002, ["unused"]) == "Expecting a semicolon."

    def test_unknown_code(self) -> None:
        with pytest.raises(CatalogError, match="QS4242") as excinfo:
            MessageCatalog().message_for(4242, [])
        assert excinfo.value.code == 4242

    def test_custom_table(self) -> None:
        codes: dict[int, CodeInfo] = {
            10: CodeInfo(number=10, kind=Severity.WARNING, name="Custom", template="{1} before {0}"),
        }
        catalog: MessageCatalog = MessageCatalog(codes)
        assert catalog.message_for(10, ["a", "b"]) == "b before a"
        assert list(catalog.codes) == [10]


class TestProtocol:
    def test_message_catalog_is_code_catalog(self) -> None:
        assert isinstance(MessageCatalog(), CodeCatalog)

    def test_default_table_kinds(self) -> None:
        kinds: set[Severity] = {info.kind for info in DEFAULT_CODES.values()}
        assert kinds == {Severity.ERROR, Severity.WARNING, Severity.INFORMATION}


class TestExplainFormatting:
    def test_detail_for_warning_shows_suppression(self) -> None:
        catalog: MessageCatalog = MessageCatalog()
        text: str = format_code_detail(info=catalog.lookup(2001), catalog=catalog)
        assert text.startswith("QS2001: UnusedVariable")
        assert "Kind: warning" in text
        assert "    Message: The variable" in text
        assert "no_warn = [2001]" in text

    def test_detail_for_error_has_no_suppression(self) -> None:
        catalog: MessageCatalog = MessageCatalog()
        text: str = format_code_detail(info=catalog.lookup(1001), catalog=catalog)
        assert "Suppress" not in text

    def test_table_lists_every_code(self) -> None:
        catalog: MessageCatalog = MessageCatalog()
        table: str = format_code_table(catalog=catalog)
        for number in DEFAULT_CODES:
            assert catalog.canonical_identifier(number) in table
