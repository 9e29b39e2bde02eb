"""
docker-machine-helper - create, set up and SSH into a docker-machine VM
with a single command.

Wraps ``docker-machine`` and ``VBoxManage`` for per-project local development.
"""

__version__ = "0.3.0"
__author__ = "docker-machine-helper contributors"

from dmhelper.models import MachineConfig
from dmhelper.provisioner import Provisioner

__all__ = ["MachineConfig", "Provisioner", "__version__"]
