import logging
import os
import tempfile
import unittest
from logging.handlers import RotatingFileHandler

from voice_call.config.logging_config import configure_logging


class TestLoggingConfig(unittest.TestCase):
    def test_configure_logging(self):
        logger = configure_logging("INFO")
        self.assertIsInstance(logger, logging.Logger)

        self.assertEqual(logger.name, "voice_call")
        self.assertEqual(logger.level, logging.INFO)
        self.assertFalse(logger.propagate)

        self.assertGreaterEqual(len(logger.handlers), 1)
        handler = logger.handlers[0]
        self.assertIsInstance(handler, logging.StreamHandler)
        formatter = handler.formatter
        self.assertEqual(formatter._fmt, "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def test_configure_logging_twice_does_not_duplicate_handlers(self):
        first = len(configure_logging("DEBUG").handlers)
        logger = configure_logging("debug")

        self.assertEqual(len(logger.handlers), first)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_unknown_level_falls_back_to_info(self):
        logger = configure_logging("CHATTY")

        self.assertEqual(logger.level, logging.INFO)

    def test_file_handler_rotates(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = os.path.join(tmp, "nested", "call.log")
            logger = configure_logging("INFO", log_file=log_file)

            file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
            self.assertEqual(len(file_handlers), 1)
            self.assertEqual(file_handlers[0].baseFilename, os.path.abspath(log_file))
            self.assertEqual(file_handlers[0].maxBytes, 10 * 1024 * 1024)
            self.assertEqual(file_handlers[0].backupCount, 5)
            self.assertTrue(os.path.exists(log_file))

            # release the file before the directory is removed
            configure_logging("INFO")


if __name__ == "__main__":
    unittest.main()
