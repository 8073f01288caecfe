import logging

import pytest

from lorm.log import Logger

_NAME = "tests.lorm.log"


@pytest.fixture
def logger():
    return Logger(logging.getLogger(_NAME))


def test_println_prefixes_newline(logger, caplog):
    with caplog.at_level(logging.INFO, logger=_NAME):
        logger.println("select 1", 1, 2)
    assert len(caplog.records) == 1
    message = caplog.records[0].getMessage()
    assert message.startswith("\nselect 1")
    assert message.endswith("1 2")


def test_println_keeps_existing_newline(logger, caplog):
    with caplog.at_level(logging.INFO, logger=_NAME):
        logger.println("\nq")
    assert not caplog.records[0].getMessage().startswith("\n\n")


def test_panicln_logs_and_raises(logger, caplog):
    with caplog.at_level(logging.INFO, logger=_NAME):
        with pytest.raises(RuntimeError, match="boom"):
            logger.panicln("boom", "x")
    assert caplog.records[0].levelno == logging.ERROR
    assert "x" in caplog.records[0].getMessage()


def test_fatalln_exits_with_one(logger, caplog):
    with caplog.at_level(logging.INFO, logger=_NAME):
        with pytest.raises(SystemExit) as exc:
            logger.fatalln("bad")
    assert exc.value.code == 1
    assert caplog.records[0].getMessage().startswith("bad")