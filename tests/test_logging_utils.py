"""Tests for structured logging utilities."""

from __future__ import annotations

import io
import json
import logging

from storefront_storage.exceptions import RemoteStoreError, SyncError
from storefront_storage.logging_utils import (
    StorageLoggerAdapter,
    StructuredJsonFormatter,
    configure_structured_logging,
    get_storage_logger,
)


def make_record(exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="storefront_storage.cosmos",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Upserted %s",
        args=("p1",),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def format_record(record: logging.LogRecord) -> dict:
    return json.loads(StructuredJsonFormatter().format(record))


class TestStructuredJsonFormatter:
    """Tests for StructuredJsonFormatter."""

    def test_formats_single_line_json(self) -> None:
        output = StructuredJsonFormatter().format(make_record())

        data = json.loads(output)
        assert "\n" not in output
        assert data["level"] == "WARNING"
        assert data["logger"] == "storefront_storage.cosmos"
        assert data["message"] == "Upserted p1"
        assert "timestamp" in data

    def test_includes_catalog_context(self) -> None:
        data = format_record(
            make_record(entity="product", entity_id="p1", operation="upsert", source="remote")
        )

        assert data["entity"] == "product"
        assert data["entity_id"] == "p1"
        assert data["operation"] == "upsert"
        assert data["source"] == "remote"

    def test_ignores_unrelated_extras(self) -> None:
        data = format_record(make_record(request_body={"big": "payload"}))

        assert "request_body" not in data

    def test_storage_error_details(self) -> None:
        error = RemoteStoreError("upsert", "products", "p1", RuntimeError("throttled"))

        data = format_record(make_record(error=error))

        assert data["error"]["type"] == "RemoteStoreError"
        assert data["error"]["details"]["entity_id"] == "p1"
        assert data["error"]["details"]["cause"] == "throttled"

    def test_storage_error_found_through_cause(self) -> None:
        cause = RemoteStoreError("upsert", "banners", "b1")
        try:
            raise SyncError("Failed to sync catalog with the remote store") from cause
        except SyncError as e:
            wrapped = RuntimeError("outer")
            wrapped.__cause__ = e
            data = format_record(make_record(error=wrapped))

        assert data["error"]["type"] == "SyncError"

    def test_plain_exceptions_have_no_error_block(self) -> None:
        data = format_record(make_record(error=ValueError("bad")))

        assert "error" not in data

    def test_exc_info_renders_traceback(self) -> None:
        try:
            raise RemoteStoreError("delete", "categories", "c1")
        except RemoteStoreError as e:
            record = make_record(exc_info=(type(e), e, e.__traceback__))

        data = format_record(record)

        assert data["error"]["type"] == "RemoteStoreError"
        assert "Traceback" in data["exception"]

    def test_keeps_accents(self) -> None:
        record = make_record()
        record.msg = "Categoria %s"
        record.args = ("Eletrônicos",)

        assert "Eletrônicos" in StructuredJsonFormatter().format(record)


class TestLoggers:
    """Tests for logger helpers."""

    def test_get_storage_logger_name(self) -> None:
        assert get_storage_logger("cosmos").name == "storefront_storage.cosmos"

    def test_configure_targets_package_namespace(self) -> None:
        logger = configure_structured_logging(logging.DEBUG)
        configure_structured_logging(logging.INFO)

        try:
            assert logger.name == "storefront_storage"
            assert len(logger.handlers) == 1
            assert isinstance(logger.handlers[0].formatter, StructuredJsonFormatter)
            assert logger.level == logging.INFO
        finally:
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)

    def test_adapter_records_render_with_context(self) -> None:
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredJsonFormatter())
        base = get_storage_logger("test_render")
        base.addHandler(handler)
        base.setLevel(logging.INFO)

        try:
            adapter = StorageLoggerAdapter(base, {"entity": "banners"})
            adapter.bind(entity_id="b1", operation="delete").info("Deleted banner b1")
        finally:
            base.removeHandler(handler)
            base.setLevel(logging.NOTSET)

        data = json.loads(stream.getvalue())
        assert data["entity"] == "banners"
        assert data["entity_id"] == "b1"
        assert data["operation"] == "delete"

    def test_call_extra_overrides_adapter_context(self, caplog) -> None:
        adapter = StorageLoggerAdapter(get_storage_logger("test_adapter"), {"entity": "banners"})

        with caplog.at_level(logging.INFO, logger="storefront_storage.test_adapter"):
            adapter.info("Fetched", extra={"operation": "fetch", "entity": "products"})

        record = caplog.records[-1]
        assert record.entity == "products"
        assert record.operation == "fetch"
