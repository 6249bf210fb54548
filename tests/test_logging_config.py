"""
Tests for logging setup.
"""

from pathlib import Path

from loguru import logger

from hoops_voter.logging_config import get_logger, setup_logging


class TestLoggingConfig:
    """Test where records end up after setup_logging."""

    def test_debug_mode_writes_separate_debug_file(self, tmp_path: Path) -> None:
        # Arrange
        log_file = tmp_path / "hoops_voter.log"
        setup_logging(level="WARNING", debug=True, log_file=str(log_file))
        component = get_logger("session")

        # Act
        component.debug("refresh details")
        component.info("vote recorded")
        logger.remove()

        # Assert
        main_log = log_file.read_text()
        debug_log = (tmp_path / "hoops_voter_debug.log").read_text()
        assert "vote recorded" in main_log
        assert "refresh details" not in main_log
        assert "session:" in debug_log and "refresh details" in debug_log

    def test_console_only_creates_no_files(self, tmp_path: Path) -> None:
        setup_logging(level="INFO", log_file=None)
        get_logger().info("console only")
        logger.remove()

        assert list(tmp_path.iterdir()) == []
