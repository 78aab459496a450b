"""Host checks performed before any cgroup is touched."""

import getpass
import os
import platform

from cgroup_manager.exceptions import EnvironmentMismatchError


def check_environment() -> None:
    """
    Verify this is a Linux host and the pass runs as root.

    Raises:
        EnvironmentMismatchError: On any other OS or for an unprivileged user.
    """
    system = platform.system()
    if system != "Linux":
        raise EnvironmentMismatchError(f"This tool was written for Linux. Detected {system}")

    if os.geteuid() != 0:
        raise EnvironmentMismatchError(
            f"This tool should be executed by the root user. Detected {getpass.getuser()}"
        )
