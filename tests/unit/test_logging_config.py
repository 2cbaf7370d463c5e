import logging

from sqlitedit.logging_config import configure_logging


def test_configure_logging_levels(caplog):
    # None: keep default WARNING (>=20)
    configure_logging(None)
    logger = logging.getLogger("sqlitedit.test")
    logger.warning("warn")
    assert any("warn" in rec.message for rec in caplog.records)

    # INFO lowers threshold
    caplog.clear()
    configure_logging(logging.INFO)
    logger.info("info-ok")
    assert any("info-ok" in rec.message for rec in caplog.records)

    # DEBUG includes debug
    caplog.clear()
    configure_logging(logging.DEBUG)
    logger.debug("dbg")
    assert any("dbg" in rec.message for rec in caplog.records)


def test_streamlit_watcher_is_quietened():
    configure_logging(logging.DEBUG)
    assert logging.getLogger("streamlit.watcher").level >= logging.INFO


def test_watchdog_is_capped_at_warning():
    logging.getLogger("watchdog").setLevel(logging.DEBUG)

    configure_logging(logging.INFO)

    assert logging.getLogger("watchdog").level == logging.WARNING
