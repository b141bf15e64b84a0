import os
import pty

import pytest


@pytest.fixture
def pty_pair():
    """Open a pseudo-terminal and yield ``(master_fd, slave_fd)``."""
    master, slave = pty.openpty()
    yield master, slave
    os.close(master)
    os.close(slave)
