"""Provisioner plugins and lookup by name."""

from rigbox.errors import ClientError
from rigbox.provisioner.base import Provisioner
from rigbox.provisioner.shell import ShellProvisioner

PROVISIONERS = {
    "dummy": Provisioner,
    "shell": ShellProvisioner,
}


def for_plugin(name, instance, config) -> Provisioner:
    """Instantiate the provisioner registered as *name*."""
    provisioner_class = PROVISIONERS.get(name)
    if provisioner_class is None:
        supported = ", ".join(sorted(PROVISIONERS))
        raise ClientError(f"Unknown provisioner '{name}'. Supported provisioners: {supported}")
    return provisioner_class(instance, config)


__all__ = [
    "PROVISIONERS",
    "Provisioner",
    "ShellProvisioner",
    "for_plugin",
]
