#!/usr/bin/env python3
"""
Example demonstrating size-based rotation with compression and retention
"""

import logging
import os
import tempfile

from rotatelog import RotateLog, RotationConfig, create_file_logger, list_backups


def raw_writer_example(log_dir: str):
    """Write bytes directly and watch backups appear"""
    config = RotationConfig(
        filename=os.path.join(log_dir, "raw.log"),
        max_size=4,
        size_unit=1024,  # rotate every 4 KB
        max_backups=3,
        compress=True,
    )

    log = RotateLog(config)
    try:
        for i in range(200):
            log.write(f"event {i:04d} ".encode() + b"." * 64 + b"\n")
        log.wait_for_maintenance(timeout=5)
    finally:
        log.shutdown()

    for backup in list_backups(log_dir, config.path):
        print(f"  {backup.name} (compressed={backup.compressed})")


def logging_example(log_dir: str):
    """Route stdlib logging records into a rotating file"""
    config = RotationConfig(
        filename=os.path.join(log_dir, "app.log"),
        max_size=1,  # 1 MB
        max_age=7,
    )
    logger = create_file_logger("rotation_example", config)

    logger.info("Service started")
    logger.warning("Disk usage at %d%%", 87)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    with tempfile.TemporaryDirectory() as log_dir:
        print("Raw writer backups:")
        raw_writer_example(log_dir)
        logging_example(log_dir)
        print("Files in", log_dir, sorted(os.listdir(log_dir)))
