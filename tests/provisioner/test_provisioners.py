"""Unit tests for rigbox.provisioner: registry, dummy and shell provisioners."""

import os
import stat

import pytest

from rigbox.errors import ClientError
from rigbox.provisioner import Provisioner, ShellProvisioner, for_plugin
from rigbox.types import Instance

INSTANCE = Instance("default-ubuntu")


# ── for_plugin ───────────────────────────────────────────────────


def test_for_plugin_known_names():
    assert type(for_plugin("dummy", INSTANCE, {})) is Provisioner
    assert isinstance(for_plugin("shell", INSTANCE, {}), ShellProvisioner)


def test_for_plugin_unknown_raises():
    with pytest.raises(ClientError, match="Unknown provisioner 'chef'. Supported provisioners: dummy, shell"):
        for_plugin("chef", INSTANCE, {})


# ── dummy ────────────────────────────────────────────────────────


def test_dummy_has_no_commands():
    provisioner = Provisioner(INSTANCE, {})
    assert provisioner.install_command is None
    assert provisioner.init_command is None
    assert provisioner.prepare_command is None
    assert provisioner.run_command is None
    assert provisioner.home_path == "/tmp/rigbox"


def test_sandbox_create_and_cleanup():
    provisioner = Provisioner(INSTANCE, {})
    path = provisioner.create_sandbox()
    assert os.path.isdir(path)
    assert "default-ubuntu-sandbox-" in os.path.basename(path)
    provisioner.cleanup_sandbox()
    assert not os.path.exists(path)
    # second cleanup is harmless
    provisioner.cleanup_sandbox()


def test_cleanup_without_sandbox_is_noop():
    Provisioner(INSTANCE, {}).cleanup_sandbox()


def test_sudo_prefix():
    assert Provisioner(INSTANCE, {"sudo": True}).sudo("ls") == "sudo -E ls"
    assert Provisioner(INSTANCE, {"sudo": False}).sudo("ls") == "ls"


# ── shell ────────────────────────────────────────────────────────


def test_shell_commands_with_sudo():
    provisioner = ShellProvisioner(INSTANCE, {"sudo": True, "script": "/x/setup.sh"})
    assert provisioner.install_command is None
    assert provisioner.init_command == "sudo -E rm -rf /tmp/rigbox ; mkdir -p /tmp/rigbox"
    assert provisioner.prepare_command is None
    assert provisioner.run_command == "sudo -E /tmp/rigbox/setup.sh"


def test_shell_commands_without_sudo_and_custom_root():
    provisioner = ShellProvisioner(INSTANCE, {"sudo": False, "root_path": "/opt/prov"})
    assert provisioner.home_path == "/opt/prov"
    assert provisioner.init_command == "rm -rf /opt/prov ; mkdir -p /opt/prov"
    assert provisioner.run_command == "/opt/prov/bootstrap.sh"


def test_shell_sandbox_contains_executable_script(tmp_path):
    script = tmp_path / "setup.sh"
    script.write_text("#!/bin/sh\necho hi\n")
    provisioner = ShellProvisioner(INSTANCE, {"script": str(script)})
    sandbox = provisioner.create_sandbox()
    try:
        copied = os.path.join(sandbox, "setup.sh")
        with open(copied) as f:
            assert f.read() == "#!/bin/sh\necho hi\n"
        assert os.stat(copied).st_mode & stat.S_IXUSR
    finally:
        provisioner.cleanup_sandbox()


def test_shell_sandbox_placeholder_script():
    provisioner = ShellProvisioner(INSTANCE, {})
    sandbox = provisioner.create_sandbox()
    try:
        with open(os.path.join(sandbox, "bootstrap.sh")) as f:
            assert "NO BOOTSTRAP SCRIPT PRESENT" in f.read()
    finally:
        provisioner.cleanup_sandbox()


def test_shell_sandbox_copies_data(tmp_path):
    data = tmp_path / "data"
    (data / "nested").mkdir(parents=True)
    (data / "nested" / "app.conf").write_text("port=80\n")
    provisioner = ShellProvisioner(INSTANCE, {"data_path": str(data)})
    sandbox = provisioner.create_sandbox()
    try:
        assert os.path.isfile(os.path.join(sandbox, "data", "nested", "app.conf"))
    finally:
        provisioner.cleanup_sandbox()


def test_shell_missing_script_raises(tmp_path):
    provisioner = ShellProvisioner(INSTANCE, {"script": str(tmp_path / "missing.sh")})
    with pytest.raises(ClientError, match="missing.sh' not found"):
        provisioner.create_sandbox()
    # the sandbox directory was created before the failure and is still cleaned up
    provisioner.cleanup_sandbox()
    assert provisioner.sandbox_path is None


def test_shell_data_path_must_be_directory(tmp_path):
    not_dir = tmp_path / "file.txt"
    not_dir.write_text("x")
    provisioner = ShellProvisioner(INSTANCE, {"data_path": str(not_dir)})
    with pytest.raises(ClientError, match="is not a directory"):
        provisioner.create_sandbox()
    provisioner.cleanup_sandbox()
